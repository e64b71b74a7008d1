"""Shared test data for faucet tests."""

from imbu_faucet.chain.models import Milestone, Project

# Well-known development phrase (DO NOT USE IN PRODUCTION)
DEV_PHRASE = "bottom drive obey lake curtain smoke basket hold race lonely fit walk"

ALICE = "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"
BOB = "5FHneW46xGXgs5mUiveU4sbTyGBzmstUspZC92UhjJM694ty"


def make_project(
    name: str = "Clean Water",
    project_key: int = 7,
    initiator: str = ALICE,
    contributions: tuple = ((BOB, 500),),
    milestone_approved: bool = False,
    percentage: int = 40,
    approved_for_funding: bool | None = None,
    milestones: tuple | None = None,
) -> Project:
    """Build a project with one milestone."""
    if milestones is None:
        milestones = (
            Milestone(
                project_key=project_key,
                name="Prototype",
                is_approved=milestone_approved,
                percentage_to_unlock=percentage,
            ),
        )
    return Project(
        key=project_key,
        name=name,
        initiator=initiator,
        milestones=milestones,
        contributions=contributions,
        approved_for_funding=approved_for_funding,
    )
