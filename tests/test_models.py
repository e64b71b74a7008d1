"""Tests for on-chain record decoding."""

from helpers import ALICE, BOB

from imbu_faucet.chain.models import Milestone, Project


def _record(**overrides):
    record = {
        "name": "0x436c65616e205761746572",  # "Clean Water"
        "initiator": ALICE,
        "milestones": [
            {
                "project_key": "7",
                "milestone_key": 0,
                "name": "Prototype",
                "percentage_to_unlock": "40",
                "is_approved": False,
            }
        ],
        "contributions": {BOB: {"value": 500}},
        "approved_for_funding": True,
    }
    record.update(overrides)
    return record


class TestMilestone:
    def test_snake_case_fields(self):
        milestone = Milestone.from_chain(
            {"project_key": 3, "name": "Beta", "is_approved": True, "percentage_to_unlock": 25}
        )

        assert milestone == Milestone(
            project_key=3, name="Beta", is_approved=True, percentage_to_unlock=25
        )

    def test_camel_case_fields(self):
        """Older type registries expose camelCase names."""
        milestone = Milestone.from_chain(
            {
                "projectKey": "1,024",
                "milestoneKey": 2,
                "name": b"Launch",
                "isApproved": "true",
                "percentageToUnlock": 60,
            }
        )

        assert milestone.project_key == 1024
        assert milestone.milestone_key == 2
        assert milestone.name == "Launch"
        assert milestone.is_approved is True
        assert milestone.percentage_to_unlock == 60


class TestProject:
    """Tests for Project.from_chain."""

    def test_decodes_record(self):
        project = Project.from_chain(7, _record())

        assert project.key == 7
        assert project.name == "Clean Water"
        assert project.display_name == "CLEAN WATER"
        assert project.initiator == ALICE
        assert project.has_contributions is True
        assert project.approved_for_funding is True
        assert project.first_milestone.name == "Prototype"
        assert project.project_key == 7

    def test_contribution_map_becomes_items(self):
        project = Project.from_chain(7, _record())

        assert project.contributions == ((BOB, {"value": 500}),)

    def test_empty_contributions(self):
        project = Project.from_chain(7, _record(contributions=None))

        assert project.has_contributions is False

    def test_missing_approval_flag(self):
        record = _record()
        del record["approved_for_funding"]

        assert Project.from_chain(7, record).approved_for_funding is None

    def test_project_key_falls_back_to_storage_key(self):
        project = Project.from_chain("12", _record(milestones=[]))

        assert project.first_milestone is None
        assert project.project_key == 12

    def test_plain_name_kept(self):
        project = Project.from_chain(1, _record(name="Solar"))

        assert project.name == "Solar"
