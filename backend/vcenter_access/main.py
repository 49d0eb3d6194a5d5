"""Run one full access-graph sync against vCenter Server and print it as JSON.

Usage:
    BATON_VCENTER_SERVER_URL=https://vcenter.example.com \\
    BATON_USERNAME=administrator@vsphere.local BATON_PASSWORD=... \\
    python -m vcenter_access.main
"""

import asyncio
import json
import sys
from typing import Any, Dict, List

from vcenter_access.core.config import settings
from vcenter_access.core.exceptions import VCenterAccessException
from vcenter_access.core.logging import configure_logging, logger
from vcenter_access.platform.sources.vcenter import VCenterConnector


async def run_sync(connector: VCenterConnector) -> Dict[str, List[Any]]:
    """Drive List, Entitlements and Grants for every resource type.

    A failing resource type is logged and skipped; the others still sync.
    """
    graph: Dict[str, List[Any]] = {"resources": [], "entitlements": [], "grants": []}

    for syncer in connector.resource_syncers():
        type_id = syncer.resource_type.id
        try:
            page = await syncer.list_resources()
            if page.degraded:
                logger.warning(f"Listing of {type_id} degraded to an empty result")

            for resource in page.items:
                entitlements = await syncer.entitlements(resource)
                grants = await syncer.grants(resource)
                graph["resources"].append(resource.model_dump(mode="json"))
                graph["entitlements"].extend(
                    {"id": e.id, **e.model_dump(mode="json", exclude={"resource"})}
                    for e in entitlements.items
                )
                graph["grants"].extend(
                    {
                        "id": g.id,
                        "entitlement": g.entitlement.id,
                        "principal": g.principal.model_dump(mode="json"),
                        "expansion": list(g.expansion) if g.expansion else None,
                    }
                    for g in grants.items
                )
        except VCenterAccessException as e:
            logger.error(f"Sync of {type_id} failed: {e}")

    return graph


async def main() -> int:
    """Connect, sync and print."""
    configure_logging(settings.LOG_LEVEL)
    try:
        connector = await VCenterConnector.create(settings)
    except VCenterAccessException as e:
        logger.error(f"Error creating connector: {e}")
        return 1

    try:
        graph = await run_sync(connector)
    finally:
        connector.close()

    json.dump(graph, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
