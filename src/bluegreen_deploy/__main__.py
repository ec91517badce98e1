"""Main entry point for bluegreen-deploy."""

import argparse
import asyncio
import os
import signal
import sys
from typing import List, Optional

import structlog
from pydantic import ValidationError

from .client import EcsClient, ElbClient, create_session
from .config import DeployConfig
from .errors import ConfigurationError
from .orchestrator import DeploymentOrchestrator
from .utils.cancel import CancellationToken
from .utils.logging import setup_logging

logger = structlog.get_logger()

USAGE = (
    "bluegreen-deploy <aws-region> <cluster> <service> <image> <container-name> "
    "<listener-arn> [shift-steps] [shift-interval-seconds]"
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse positional CLI arguments.

    Pass an empty string for ``image`` and ``container-name`` to reuse the
    current task definition.
    """
    parser = argparse.ArgumentParser(
        prog="bluegreen-deploy",
        usage=USAGE,
        description="Blue/green deployment of an ECS service behind an ALB listener. "
        "Target groups are read from BLUE_TG_ARN and GREEN_TG_ARN.",
    )
    parser.add_argument("region", help="AWS region")
    parser.add_argument("cluster", help="ECS cluster")
    parser.add_argument("service", help="ECS service")
    parser.add_argument("image", help="Image to deploy, or '' to keep the current one")
    parser.add_argument("container_name", help="Container receiving the image, or ''")
    parser.add_argument("listener_arn", help="ALB listener ARN")
    parser.add_argument("shift_steps", nargs="?", type=int, help="Weight steps (default 10)")
    parser.add_argument(
        "shift_interval", nargs="?", type=int, help="Seconds between steps (default 15)"
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> DeployConfig:
    """Build the immutable deployment configuration.

    Arguments left out fall back to environment variables and defaults.

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    values = {key: value for key, value in vars(args).items() if value is not None}
    try:
        return DeployConfig(**values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from e


async def run(config: DeployConfig) -> int:
    """Run one deployment and return the process exit code."""
    session = await asyncio.to_thread(create_session, config.region)
    cancel_token = CancellationToken()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, cancel_token.cancel, sig.name)

    orchestrator = DeploymentOrchestrator(
        config,
        ecs=EcsClient(session),
        elb=ElbClient(session),
        cancel_token=cancel_token,
    )
    outcome = await orchestrator.deploy()
    return outcome.exit_code


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    setup_logging(os.environ.get("BLUEGREEN_LOG_LEVEL", "INFO"))
    args = parse_args(argv)

    try:
        config = build_config(args)
        setup_logging(config.log_level)
        exit_code = asyncio.run(run(config))
    except ConfigurationError as e:
        logger.error("deploy.configuration_error", error=e.message, usage=USAGE)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("deploy.interrupted")
        sys.exit(130)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
