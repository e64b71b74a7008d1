"""Project funding workflow.

A project moves through four stages, read from its on-chain record:

    NO_CONTRIBUTIONS -> FUNDABLE_NO_APPROVAL
        -> FUNDING_APPROVED_MILESTONE_PENDING -> MILESTONE_APPROVED

The ledger enforces most transitions. The workflow adds the local rules
below before it submits anything:

- schedule: always allowed for an existing project
- approve: the project must have contributions
- milestone: the first milestone must not be approved yet and the project
  must have contributions

Only the first milestone is addressable.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from substrateinterface import Keypair

from imbu_faucet.chain.gateway import LedgerConnection
from imbu_faucet.chain.models import Project

logger = logging.getLogger(__name__)

FIRST_MILESTONE = 0


class WorkflowCommand(str, Enum):
    """Workflow commands accepted from chat."""

    SCHEDULE = "schedule"
    APPROVE = "approve"
    MILESTONE = "milestone"


class ProjectState(str, Enum):
    """Lifecycle stage inferred from a project's on-chain fields."""

    NO_CONTRIBUTIONS = "no_contributions"
    FUNDABLE_NO_APPROVAL = "fundable_no_approval"
    FUNDING_APPROVED_MILESTONE_PENDING = "funding_approved_milestone_pending"
    MILESTONE_APPROVED = "milestone_approved"


class OutcomeStatus(str, Enum):
    """How a workflow command ended."""

    SUBMITTED = "submitted"
    NO_CONTRIBUTIONS = "no_contributions"
    NO_MILESTONES = "no_milestones"
    ALREADY_APPROVED = "already_approved"


@dataclass
class WorkflowOutcome:
    """Result of one workflow transition."""

    status: OutcomeStatus
    message: str
    tx_hash: str | None = None
    start_block: int | None = None
    end_block: int | None = None

    @property
    def submitted(self) -> bool:
        return self.status == OutcomeStatus.SUBMITTED


def state_of(project: Project) -> ProjectState:
    """Infer the lifecycle stage of a project."""
    milestone = project.first_milestone
    if milestone is not None and milestone.is_approved:
        return ProjectState.MILESTONE_APPROVED
    if not project.has_contributions:
        return ProjectState.NO_CONTRIBUTIONS
    if project.approved_for_funding:
        return ProjectState.FUNDING_APPROVED_MILESTONE_PENDING
    return ProjectState.FUNDABLE_NO_APPROVAL


def _unlocked_message(project: Project, verb: str) -> str:
    milestone = project.first_milestone
    return (
        f'Project "{project.display_name}" first milestone [{milestone.name.upper()}] '
        f"has {verb} approved. You can now withdraw "
        f"{milestone.percentage_to_unlock}% of the total required funds"
    )


class ProjectWorkflow:
    """Decide and submit project lifecycle transitions.

    Parameters
    ----------
    round_start_offset : int
        Blocks between the chain head and the start of a scheduled round.
    round_length : int
        Length of a funding round in blocks.
    """

    def __init__(self, round_start_offset: int = 1, round_length: int = 100):
        self._round_start_offset = round_start_offset
        self._round_length = round_length

    def run(
        self,
        command: WorkflowCommand,
        connection: LedgerConnection,
        keypair: Keypair,
        project: Project,
    ) -> WorkflowOutcome:
        """Dispatch a command to its transition."""
        handlers = {
            WorkflowCommand.SCHEDULE: self.schedule,
            WorkflowCommand.APPROVE: self.approve,
            WorkflowCommand.MILESTONE: self.approve_milestone,
        }
        handler = handlers.get(command)
        if handler is None:
            raise ValueError(f"Unknown workflow command: {command}")

        logger.info(
            "Running workflow command",
            extra={
                "command": WorkflowCommand(command).value,
                "project_key": project.project_key,
                "state": state_of(project).value,
            },
        )
        return handler(connection, keypair, project)

    def round_bounds(self, head: int) -> tuple[int, int]:
        """Block range of a round scheduled at chain head ``head``."""
        start_block = head + self._round_start_offset
        return start_block, start_block + self._round_length

    def schedule(
        self, connection: LedgerConnection, keypair: Keypair, project: Project
    ) -> WorkflowOutcome:
        start_block, end_block = self.round_bounds(connection.latest_block_number())
        tx_hash = connection.schedule_round(keypair, [project.project_key], start_block, end_block)
        return WorkflowOutcome(
            status=OutcomeStatus.SUBMITTED,
            message=(
                f'Project "{project.display_name}" has been scheduled for funding.\n\n'
                f"Contributors can fund between blocks {start_block} and {end_block}."
            ),
            tx_hash=tx_hash,
            start_block=start_block,
            end_block=end_block,
        )

    def approve(
        self, connection: LedgerConnection, keypair: Keypair, project: Project
    ) -> WorkflowOutcome:
        if not project.has_contributions:
            return WorkflowOutcome(
                status=OutcomeStatus.NO_CONTRIBUTIONS,
                message=(
                    f'Project "{project.display_name}" has no contributions. '
                    "Cannot approve funding!"
                ),
            )

        tx_hash = connection.approve_funding(keypair, project.project_key, None)
        return WorkflowOutcome(
            status=OutcomeStatus.SUBMITTED,
            message=(
                f'Project "{project.display_name}" funding has been approved. '
                "You can now submit your milestones!"
            ),
            tx_hash=tx_hash,
        )

    def approve_milestone(
        self, connection: LedgerConnection, keypair: Keypair, project: Project
    ) -> WorkflowOutcome:
        milestone = project.first_milestone
        if milestone is None:
            return WorkflowOutcome(
                status=OutcomeStatus.NO_MILESTONES,
                message=f'Project "{project.display_name}" has no milestones to approve!',
            )

        if milestone.is_approved:
            return WorkflowOutcome(
                status=OutcomeStatus.ALREADY_APPROVED,
                message=_unlocked_message(project, "already been"),
            )
        if not project.has_contributions:
            return WorkflowOutcome(
                status=OutcomeStatus.NO_CONTRIBUTIONS,
                message=(
                    f'Project "{project.display_name}" has no contributions. '
                    "Cannot approve milestone voting!"
                ),
            )

        tx_hash = connection.approve_funding(keypair, project.project_key, FIRST_MILESTONE)
        return WorkflowOutcome(
            status=OutcomeStatus.SUBMITTED,
            message=_unlocked_message(project, "been"),
            tx_hash=tx_hash,
        )
