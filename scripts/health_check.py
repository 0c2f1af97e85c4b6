#!/usr/bin/env python3
"""健康检查脚本。

检查 PostgreSQL、OpenAI 与 GitHub API 的可用性，可作为运维探针使用。

使用方式：
    python scripts/health_check.py
    python scripts/health_check.py --component github
    python scripts/health_check.py --json --strict
"""

import argparse
import asyncio
import json
import sys
from datetime import UTC, datetime
from pathlib import Path

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


async def check_database() -> dict:
    """检查数据库连接与 pgcrypto 扩展。"""
    from keydash.core.config import settings
    from keydash.core.infrastructure.database.session import Database

    database = Database.from_settings(settings)
    try:
        return (await database.check_health()).to_dict()
    finally:
        await database.dispose()


async def check_ai() -> dict:
    """检查摘要模型是否可访问。"""
    from keydash.core.infrastructure.ai import check_ai_service_health

    return (await check_ai_service_health()).to_dict()


async def check_github() -> dict:
    """检查 GitHub API 可达性与剩余配额。"""
    import httpx

    from keydash.core.config import settings

    headers = {"Accept": "application/vnd.github+json"}
    if settings.GITHUB_TOKEN:
        headers["Authorization"] = f"Bearer {settings.GITHUB_TOKEN}"
    try:
        async with httpx.AsyncClient(
            base_url=settings.GITHUB_API_BASE,
            headers=headers,
            timeout=settings.GITHUB_TIMEOUT_SEC,
        ) as client:
            response = await client.get("/rate_limit")
            response.raise_for_status()
            core = response.json().get("resources", {}).get("core", {})
    except httpx.HTTPError as e:
        return {"status": "error", "error": str(e)}

    remaining = core.get("remaining", 0)
    return {
        "status": "ok" if remaining > 0 else "degraded",
        "remaining": remaining,
        "limit": core.get("limit"),
    }


CHECKERS = {
    "database": check_database,
    "ai": check_ai,
    "github": check_github,
}


async def run_checks(components: list[str]) -> dict:
    results = await asyncio.gather(
        *(CHECKERS[name]() for name in components), return_exceptions=True
    )

    report: dict = {
        "timestamp": datetime.now(UTC).isoformat(),
        "overall_status": "healthy",
        "components": {},
    }
    for name, result in zip(components, results, strict=True):
        if isinstance(result, Exception):
            result = {"status": "error", "error": str(result)}
        report["components"][name] = result

    statuses = [c.get("status") for c in report["components"].values()]
    if report["components"].get("database", {}).get("status") == "error":
        report["overall_status"] = "unhealthy"
    elif any(s not in ("ok", "skipped") for s in statuses):
        report["overall_status"] = "degraded"
    return report


def print_result(result: dict, json_output: bool = False) -> None:
    if json_output:
        print(json.dumps(result, indent=2))
        return

    print(f"\n{'=' * 60}")
    print(f"Health Check Report - {result['timestamp']}")
    print(f"{'=' * 60}")
    print(f"\nOverall Status: {result['overall_status'].upper()}")
    print(f"\n{'-' * 40}")
    for component, info in result["components"].items():
        print(f"{component}: {info.get('status', 'unknown')}")
        if info.get("status") not in ("ok", "skipped"):
            for key, value in info.items():
                if key != "status":
                    print(f"    {key}: {value}")
    print(f"\n{'=' * 60}\n")


def main() -> None:
    parser = argparse.ArgumentParser(description="系统健康检查脚本")
    parser.add_argument(
        "--component",
        "-c",
        choices=sorted(CHECKERS),
        help="只检查特定组件",
    )
    parser.add_argument("--json", action="store_true", help="输出 JSON 格式")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="严格模式：任何非 healthy 状态都返回非零退出码",
    )
    args = parser.parse_args()

    components = [args.component] if args.component else list(CHECKERS)
    result = asyncio.run(run_checks(components))
    print_result(result, args.json)

    if args.strict and result["overall_status"] != "healthy":
        sys.exit(1)


if __name__ == "__main__":
    main()
