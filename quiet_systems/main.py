"""Main module entrypoint for local runtime execution.

This module validates startup configuration and launches the FastAPI service.
"""

import argparse

import structlog
import uvicorn

from quiet_systems.bootstrap import bootstrap_create_application
from quiet_systems.config import config_configure_logging, config_load_settings

logger = structlog.get_logger(__name__)


def main() -> None:
    """Run the API server with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
    """

    argument_parser = argparse.ArgumentParser(description="Quiet Systems service entrypoint")
    argument_parser.add_argument(
        "--port",
        dest="port",
        type=int,
        help="Optional port override for the `PORT` setting",
    )
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    if parsed_arguments.port is not None:
        settings = settings.model_copy(update={"port": parsed_arguments.port})
    config_configure_logging(settings)

    application = bootstrap_create_application(settings=settings)
    logger.info(
        "service_starting",
        host=settings.application_host,
        port=settings.port,
        version=settings.version,
        revenue_target=settings.revenue_target,
    )
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
