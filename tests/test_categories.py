"""Tests for category and onboarding leaderboards."""

import pytest

from agency_leaderboard.core.errors import InvalidCategoryError
from agency_leaderboard.core.records import (
    Agent,
    AgentBadge,
    AgentPoints,
    Client,
    Commission,
    LeaderboardCategory,
    License,
    OnboardingChecklistItem,
)
from agency_leaderboard.team.categories import category_leaderboard, find_entry, record_ranks
from agency_leaderboard.team.onboarding import onboarding_leaderboard


@pytest.fixture
def roster():
    """Two agents with sales, clients and licenses."""
    return {
        'agents': [
            Agent(id="a1", first_name="Ann", last_name="Lee", ahip_completion_date="2026-01-15"),
            Agent(id="a2", first_name="Bo", last_name="Diaz"),
        ],
        'agent_points': [
            AgentPoints.from_dict({"agent_id": "a1", "monthly_points": 10, "current_streak": 4, "rank_overall": 2}),
            AgentPoints.from_dict({"agent_id": "a2", "level": 3, "rank_overall": 1}),
        ],
        'commissions': [Commission("a1", 1000), Commission("a2", 5000)],
        'clients': [
            Client("a1", "active", satisfaction_score=4),
            Client("a1", "churned"),
            Client("a2", "active", satisfaction_score=5),
        ],
        'licenses': [
            License("a1", "active"),
            License("a1", "active"),
            License("a1", "expired"),
            License("a2", "active"),
        ],
    }


class TestCategoryLeaderboard:
    """Tests for category_leaderboard."""

    def test_category_scores(self, roster):
        entries = category_leaderboard(**roster, category="overall")
        a1 = find_entry(entries, "a1")
        a2 = find_entry(entries, "a2")

        assert a1.scores[LeaderboardCategory.SALES] == 1000
        assert a1.scores[LeaderboardCategory.SATISFACTION] == 40
        assert a1.scores[LeaderboardCategory.COMPLIANCE] == 70
        assert a1.scores[LeaderboardCategory.RETENTION] == 50
        assert a1.scores[LeaderboardCategory.OVERALL] == pytest.approx(130)

        assert a2.scores[LeaderboardCategory.COMPLIANCE] == 20
        assert a2.scores[LeaderboardCategory.RETENTION] == 100
        assert a2.scores[LeaderboardCategory.OVERALL] == pytest.approx(120)

    def test_rank_change_and_trend(self, roster):
        entries = category_leaderboard(**roster, category=LeaderboardCategory.OVERALL)
        assert [e.agent.id for e in entries] == ["a1", "a2"]

        assert entries[0].previous_rank == 2
        assert entries[0].change == 1
        assert entries[0].trend == "up"

        assert entries[1].change == -1
        assert entries[1].trend == "down"

    def test_missing_previous_rank_defaults_to_999(self, roster):
        entries = category_leaderboard(**roster, category="sales")
        assert [e.agent.id for e in entries] == ["a2", "a1"]
        assert entries[0].previous_rank == 999
        assert entries[0].change == 998

    def test_change_sign_convention(self):
        points = [AgentPoints(agent_id="x", ranks={LeaderboardCategory.SALES: 5})]
        agents = [Agent(id="p0"), Agent(id="x")]
        commissions = [Commission("p0", 10), Commission("x", 5)]
        entries = category_leaderboard(agents, points, commissions, [], [], "sales")
        x = find_entry(entries, "x")
        assert x.rank == 2
        assert x.change == 3

    def test_unchanged_rank(self):
        points = [AgentPoints(agent_id="a", ranks={LeaderboardCategory.SALES: 1})]
        entries = category_leaderboard([Agent(id="a")], points, [], [], [], "sales")
        assert entries[0].change == 0
        assert entries[0].trend == "same"

    def test_agent_without_points(self):
        entries = category_leaderboard([Agent(id="a")], [], [], [], [], "overall")
        assert entries[0].points == 0
        assert entries[0].level == 1
        assert entries[0].previous_rank == 999

    def test_ties_keep_roster_order(self):
        agents = [Agent(id="a"), Agent(id="b"), Agent(id="c")]
        entries = category_leaderboard(agents, [], [], [], [], "compliance")
        assert [e.agent.id for e in entries] == ["a", "b", "c"]

    def test_limit(self, roster):
        entries = category_leaderboard(**roster, category="sales", limit=1)
        assert len(entries) == 1

    def test_unknown_category(self, roster):
        with pytest.raises(InvalidCategoryError):
            category_leaderboard(**roster, category="popularity")

    def test_points_rank_fields_parse_to_typed_map(self):
        points = AgentPoints.from_dict({"agent_id": "a", "rank_sales": 4, "rank_retention": 0, "rank_bogus": 2})
        assert points.ranks == {LeaderboardCategory.SALES: 4}
        assert points.previous_rank(LeaderboardCategory.RETENTION) == 999
        assert points.to_dict()["rank_sales"] == 4


class TestRecordRanks:
    """Tests for persisting ranks for the next period."""

    def test_record_ranks(self, roster):
        entries = category_leaderboard(**roster, category="overall")
        updated = {p.agent_id: p for p in record_ranks(entries, roster['agent_points'], "overall")}

        assert updated["a1"].ranks[LeaderboardCategory.OVERALL] == 1
        assert updated["a2"].ranks[LeaderboardCategory.OVERALL] == 2
        assert updated["a1"].monthly_points == 10

        # Originals untouched
        assert roster['agent_points'][0].ranks[LeaderboardCategory.OVERALL] == 2

    def test_record_ranks_creates_missing_points(self):
        entries = category_leaderboard([Agent(id="new")], [], [], [], [], "sales")
        updated = record_ranks(entries, [], LeaderboardCategory.SALES)
        assert updated[0].agent_id == "new"
        assert updated[0].ranks == {LeaderboardCategory.SALES: 1}

    def test_next_board_shows_no_movement(self, roster):
        entries = category_leaderboard(**roster, category="overall")
        roster['agent_points'] = record_ranks(entries, roster['agent_points'], "overall")
        again = category_leaderboard(**roster, category="overall")
        assert all(e.change == 0 for e in again)


class TestOnboardingLeaderboard:
    """Tests for onboarding_leaderboard."""

    def test_ranks_by_badges_and_progress(self):
        agents = [Agent(id="a1"), Agent(id="a2"), Agent(id="a3")]
        badges = [AgentBadge("a1", 10), AgentBadge("a1", 20), AgentBadge("a2", 100)]
        checklist = (
            [OnboardingChecklistItem("a1", True)] * 3
            + [OnboardingChecklistItem("a1", False)]
            + [OnboardingChecklistItem("a3", True), OnboardingChecklistItem("a3", False)]
        )
        entries = onboarding_leaderboard(agents, badges, checklist)

        assert [e.agent.id for e in entries] == ["a1", "a3", "a2"]
        assert [e.rank for e in entries] == [1, 2, 3]

        a1 = entries[0]
        assert a1.progress_percent == 75
        assert a1.badge_count == 2
        assert a1.total_score == 405

        assert entries[1].total_score == 250
        assert entries[2].progress_percent == 0
        assert entries[2].total_score == 100

    def test_limit(self):
        agents = [Agent(id=str(i)) for i in range(12)]
        assert len(onboarding_leaderboard(agents, [], [], limit=10)) == 10
