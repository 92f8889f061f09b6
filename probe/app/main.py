import asyncio
import sys
from typing import Any

from loguru import logger

from probe.app.composition import create_probe_dependencies
from probe.app.config.settings import Settings
from probe.app.core import SERVICE_NAME
from probe.app.domain.models import SessionReport
from probe.app.ports.broker_session import SessionConnectError


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


async def run_probe(settings: Settings | None = None) -> SessionReport:
    deps = create_probe_dependencies(settings)
    _log("probe_starting", backend=deps.settings.session_backend, url=deps.settings.broker_url)
    async with deps:
        report = await deps.bootstrapper.run()
    _log("probe_finished", flushed=report.flushed, errors=len(report.errors))
    return report


def main() -> None:
    try:
        report = asyncio.run(run_probe())
    except SessionConnectError as e:
        logger.error("Error: {}", e)
        sys.exit(1)
    except KeyboardInterrupt:
        _log("probe_interrupted")
        sys.exit(130)
    except Exception as e:
        logger.exception("probe failed: {}", e)
        raise
    print(report.last_error_line())


if __name__ == "__main__":
    main()
