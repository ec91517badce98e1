"""Weighted blue/green traffic shifting on an ALB listener."""

from typing import List, Optional

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from ..client.base import LoadBalancerControlPlane
from ..errors import ConfigurationError, ShiftAbortedError, ShiftPrecheckError, ShiftStepError
from ..models import TrafficWeights
from ..utils.cancel import CancellationToken

logger = structlog.get_logger()


def weight_plan(steps: int) -> List[TrafficWeights]:
    """Compute the green/blue weights written at each step.

    Green weight is ``step * 100 // steps`` (floor, not rounded), so
    steps=3 gives 33, 66, 100. The last step is always 100/0.

    Raises:
        ValueError: If ``steps`` is less than 1
    """
    if steps < 1:
        raise ValueError(f"steps must be >= 1, got {steps}")

    plan = []
    for step in range(1, steps + 1):
        green = step * 100 // steps
        plan.append(TrafficWeights(green=green, blue=100 - green))
    return plan


class TrafficShifter:
    """Moves listener traffic from the blue to the green target group."""

    def __init__(
        self,
        elb: LoadBalancerControlPlane,
        cancel_token: Optional[CancellationToken] = None,
    ):
        """Initialize traffic shifter.

        Args:
            elb: Load balancer control plane
            cancel_token: Token that interrupts the wait between steps
        """
        self.elb = elb
        self.cancel_token = cancel_token or CancellationToken()

    async def shift(
        self,
        listener_arn: str,
        blue_tg_arn: str,
        green_tg_arn: str,
        steps: int,
        interval: float,
    ) -> List[TrafficWeights]:
        """Shift traffic to green over ``steps`` writes ``interval`` seconds apart.

        Each step replaces both weights in a single listener update. A failed
        write is neither retried nor reverted.

        Returns:
            Weights applied, in order

        Raises:
            ConfigurationError: If ``steps`` < 1 or the target groups are equal
            ShiftPrecheckError: If the listener cannot be read; nothing written
            ShiftStepError: If a weight write fails; traffic stays at the
                last applied split
            ShiftAbortedError: If cancelled between steps
        """
        if steps < 1:
            raise ConfigurationError(f"Shift steps must be >= 1, got {steps}")
        if blue_tg_arn == green_tg_arn:
            raise ConfigurationError("Blue and green target groups must differ")

        logger.info(
            "traffic.shift_starting",
            blue=blue_tg_arn,
            green=green_tg_arn,
            listener=listener_arn,
        )

        try:
            exists = await self.elb.listener_exists(listener_arn)
        except (BotoCoreError, ClientError) as e:
            logger.error("traffic.listener_unreachable", listener=listener_arn, error=str(e))
            raise ShiftPrecheckError(f"Failed to describe listener {listener_arn}: {e}") from e
        if not exists:
            logger.error("traffic.listener_not_found", listener=listener_arn)
            raise ShiftPrecheckError(f"Listener not found: {listener_arn}")

        logger.info("traffic.listener_retrieved", listener=listener_arn)

        applied: List[TrafficWeights] = []
        for step, weights in enumerate(weight_plan(steps), start=1):
            if self.cancel_token.cancelled:
                last = applied[-1] if applied else None
                raise ShiftAbortedError(
                    f"Traffic shift aborted before step {step}/{steps}",
                    step=step,
                    last_applied=last,
                    applied=applied,
                )

            logger.info(
                "traffic.step",
                step=f"{step}/{steps}",
                green=weights.green,
                blue=weights.blue,
            )

            try:
                await self.elb.set_forwarding_weights(
                    listener_arn,
                    [(green_tg_arn, weights.green), (blue_tg_arn, weights.blue)],
                )
            except (BotoCoreError, ClientError) as e:
                last = applied[-1] if applied else None
                logger.error(
                    "traffic.step_failed",
                    step=step,
                    last_green=last.green if last else 0,
                    last_blue=last.blue if last else 100,
                    error=str(e),
                )
                raise ShiftStepError(
                    f"Weight update failed at step {step}/{steps}: {e}",
                    step=step,
                    last_applied=last,
                    applied=applied,
                ) from e

            applied.append(weights)

            if step < steps:
                logger.info("traffic.sleeping", seconds=interval)
                if await self.cancel_token.wait(interval):
                    logger.error(
                        "traffic.shift_aborted",
                        step=step,
                        green=weights.green,
                        blue=weights.blue,
                        reason=self.cancel_token.reason,
                    )
                    raise ShiftAbortedError(
                        f"Traffic shift aborted after step {step}/{steps} "
                        f"(green={weights.green}%, blue={weights.blue}%)",
                        step=step,
                        last_applied=weights,
                        applied=applied,
                    )

        logger.info("traffic.shift_complete", green=green_tg_arn)
        return applied
