"""Tests for the metric scoring engine."""

import pytest
from datetime import datetime, timedelta, timezone

from agency_leaderboard.core.collector import AgentRecords, collect_agent_records
from agency_leaderboard.core.config import DEFAULT_WEIGHTS, ScoreWeights
from agency_leaderboard.core.errors import InvalidMetricError, InvalidWeightsError, MissingCollectionError
from agency_leaderboard.core.records import (
    Agent,
    Client,
    ClientInteraction,
    Commission,
    Contract,
    License,
    OnboardingChecklistItem,
    ProactiveOutreach,
    RiskAssessment,
    Task,
)
from agency_leaderboard.core.scorer import AgentMetrics, MetricKey, MetricScorer, round_half_up, score_agent

AS_OF = datetime(2026, 6, 30, 12, 0, tzinfo=timezone.utc)


def records(**collections) -> AgentRecords:
    return AgentRecords(agent=Agent(id="a1", first_name="Ann", last_name="Lee"), **collections)


class TestRoundHalfUp:
    """Tests for half-up rounding."""

    def test_rounds_half_up(self):
        assert round_half_up(12.5) == 13
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3

    def test_rounds_other_values_normally(self):
        assert round_half_up(33.333) == 33
        assert round_half_up(66.667) == 67
        assert round_half_up(0) == 0


class TestScoreWeights:
    """Tests for overall-score weights."""

    def test_default_weights_sum_to_one(self):
        assert 0.15 + 0.15 + 0.10 + 0.10 + 0.20 + 0.15 + 0.10 + 0.05 == 1.00
        assert DEFAULT_WEIGHTS.total == 1.00

    def test_default_weights_in_whole_percent(self):
        percents = [round(v * 100) for v in DEFAULT_WEIGHTS.to_dict().values()]
        assert percents == [15, 15, 10, 10, 20, 15, 10, 5]
        assert sum(percents) == 100

    def test_unbalanced_weights_rejected(self):
        with pytest.raises(InvalidWeightsError):
            ScoreWeights(licenses=0.5).validate()

    def test_scorer_validates_weights(self):
        with pytest.raises(InvalidWeightsError):
            MetricScorer(ScoreWeights(conversion=0.5))


class TestMetricScorer:
    """Tests for MetricScorer."""

    def setup_method(self):
        """Set up test fixtures."""
        self.scorer = MetricScorer()

    def test_no_records_scores_zero(self):
        """Agents with nothing recorded score zero everywhere, not an error."""
        metrics = self.scorer.score(records(), AS_OF)
        assert metrics == AgentMetrics()
        assert all(v == 0 for v in metrics.scores().values())

    def test_license_score(self):
        full = self.scorer.score(records(licenses=[License("a1", "active"), License("a1", "active")]), AS_OF)
        assert full.licenses == 100
        assert full.active_licenses == 2

        partial = self.scorer.score(records(licenses=[
            License("a1", "active"),
            License("a1", "expired"),
            License("a1", "pending"),
            License("a1", "expired"),
        ]), AS_OF)
        assert partial.licenses == 25

    def test_contract_score_counts_signed_and_active(self):
        metrics = self.scorer.score(records(contracts=[
            Contract("a1", "active"),
            Contract("a1", "contract_signed"),
            Contract("a1", "pending"),
        ]), AS_OF)
        assert metrics.contracts == 40
        assert metrics.active_contracts == 2

    def test_contract_score_clamped(self):
        metrics = self.scorer.score(records(contracts=[Contract("a1", "active")] * 6), AS_OF)
        assert metrics.contracts == 100

    def test_onboarding_and_task_scores(self):
        metrics = self.scorer.score(records(
            checklist_items=[
                OnboardingChecklistItem("a1", True),
                OnboardingChecklistItem("a1", True),
                OnboardingChecklistItem("a1", False),
            ],
            tasks=[Task("a1", "completed"), Task("a1", "open")],
        ), AS_OF)
        assert metrics.onboarding == 67
        assert metrics.tasks == 50
        assert metrics.completed_tasks == 1
        assert metrics.total_tasks == 2

    def test_total_commissions_treats_missing_amount_as_zero(self):
        commissions = [
            Commission.from_dict({"agent_id": "a1", "amount": 100.5}),
            Commission.from_dict({"agent_id": "a1"}),
            Commission.from_dict({"agent_id": "a1", "amount": "250"}),
        ]
        metrics = self.scorer.score(records(commissions=commissions), AS_OF)
        assert metrics.total_commissions == pytest.approx(350.5)

    def test_health_score_averages_sentiment(self):
        metrics = self.scorer.score(records(clients=[
            Client("a1", "active", sentiment_score=0.8),
            Client("a1", "active", sentiment_score=0.5),
        ]), AS_OF)
        assert metrics.health_score == 65

    def test_health_score_rounds_half_up(self):
        metrics = self.scorer.score(records(clients=[
            Client("a1", "active", sentiment_score=0.25),
            Client.from_dict({"agent_id": "a1", "status": "active"}),
        ]), AS_OF)
        assert metrics.health_score == 13

    def test_retention_rate(self):
        metrics = self.scorer.score(records(clients=[
            Client("a1", "active"),
            Client("a1", "active"),
            Client("a1", "prospect"),
            Client("a1", "churned"),
        ]), AS_OF)
        assert metrics.retention == 75
        assert metrics.active_clients == 2
        assert metrics.churned == 1
        assert metrics.total_clients == 4

    def test_no_clients_scores_zero_health_and_retention(self):
        metrics = self.scorer.score(records(licenses=[License("a1", "active")]), AS_OF)
        assert metrics.health_score == 0
        assert metrics.retention == 0

    def test_engagement_score(self):
        recent = AS_OF - timedelta(days=3)
        metrics = self.scorer.score(records(
            clients=[Client("a1", "active"), Client("a1", "active")],
            interactions=[
                ClientInteraction("a1", "outbound", recent),
                ClientInteraction("a1", "outbound", recent),
                ClientInteraction("a1", "outbound", recent),
                ClientInteraction("a1", "outbound", AS_OF - timedelta(days=45)),
                ClientInteraction("a1", "inbound", recent),
            ],
            outreach=[
                ProactiveOutreach("a1", response_received=True, status="completed"),
                ProactiveOutreach("a1", response_received=False, status="completed"),
            ],
        ), AS_OF)
        assert metrics.proactive_interactions == 3
        assert metrics.successful_outreach == 1
        assert metrics.engagement == 100

    def test_engagement_score_is_not_clamped(self):
        recent = AS_OF - timedelta(days=1)
        metrics = self.scorer.score(records(
            clients=[Client("a1", "active")],
            interactions=[ClientInteraction("a1", "outbound", recent)] * 3,
        ), AS_OF)
        assert metrics.engagement == 150

    def test_engagement_window_is_inclusive(self):
        metrics = self.scorer.score(records(
            interactions=[
                ClientInteraction("a1", "outbound", AS_OF - timedelta(days=30)),
                ClientInteraction("a1", "outbound", AS_OF - timedelta(days=30, seconds=1)),
            ],
        ), AS_OF)
        assert metrics.proactive_interactions == 1

    def test_undated_interactions_never_recent(self):
        metrics = self.scorer.score(records(
            interactions=[ClientInteraction.from_dict({"agent_id": "a1", "direction": "outbound"})],
        ), AS_OF)
        assert metrics.proactive_interactions == 0

    def test_engagement_window_configurable(self):
        scorer = MetricScorer(engagement_window_days=7)
        metrics = scorer.score(records(
            interactions=[ClientInteraction("a1", "outbound", AS_OF - timedelta(days=10))],
        ), AS_OF)
        assert metrics.proactive_interactions == 0

    def test_conversion_score(self):
        metrics = self.scorer.score(records(
            risk_assessments=[
                RiskAssessment("a1", "resolved"),
                RiskAssessment("a1", "open"),
                RiskAssessment("a1", "open"),
            ],
            outreach=[
                ProactiveOutreach("a1", status="completed", opportunity_type="market_opportunity"),
                ProactiveOutreach("a1", status="scheduled", opportunity_type="cost_savings"),
                ProactiveOutreach("a1", status="completed", opportunity_type="check_in"),
            ],
        ), AS_OF)
        # 33 * 0.4 + 50 * 0.6
        assert metrics.conversion == 43
        assert metrics.resolved_risks == 1
        assert metrics.completed_opportunities == 1

    def test_overall_score_weighted(self):
        metrics = self.scorer.score(records(
            licenses=[License("a1", "active")],
            contracts=[Contract("a1", "active")] * 5,
            checklist_items=[OnboardingChecklistItem("a1", True)],
            tasks=[Task("a1", "completed")],
            clients=[Client("a1", "active", sentiment_score=1.0)],
            outreach=[ProactiveOutreach("a1", response_received=True, status="completed")],
        ), AS_OF)
        assert metrics.engagement == 50
        assert metrics.conversion == 0
        # 15 + 15 + 10 + 10 + 20 + 15 + 5 + 0
        assert metrics.overall == 90

    def test_custom_weights(self):
        weights = ScoreWeights(
            licenses=1.0, contracts=0, onboarding=0, tasks=0,
            health_score=0, retention=0, engagement=0, conversion=0
        )
        metrics = score_agent(records(licenses=[License("a1", "active"), License("a1", "lapsed")]), AS_OF, weights)
        assert metrics.overall == 50

    def test_scoring_is_idempotent(self):
        bundle = records(
            licenses=[License("a1", "active")],
            clients=[Client("a1", "churned", sentiment_score=0.4)],
            interactions=[ClientInteraction("a1", "outbound", AS_OF)],
        )
        assert self.scorer.score(bundle, AS_OF) == self.scorer.score(bundle, AS_OF)

    def test_naive_as_of_taken_as_utc(self):
        bundle = records(interactions=[ClientInteraction("a1", "outbound", AS_OF - timedelta(days=1))])
        naive = self.scorer.score(bundle, AS_OF.replace(tzinfo=None))
        assert naive.proactive_interactions == 1

    def test_naive_interaction_date_taken_as_utc(self):
        bundle = records(
            clients=[Client("a1", "active")],
            interactions=[
                ClientInteraction("a1", "outbound", datetime(2026, 6, 29, 12)),
                ClientInteraction("a1", "outbound", datetime(2026, 5, 1, 12)),
            ],
        )
        metrics = self.scorer.score(bundle, AS_OF)
        assert metrics.proactive_interactions == 1
        assert metrics.engagement == 50

        naive = self.scorer.score(bundle, AS_OF.replace(tzinfo=None))
        assert naive.proactive_interactions == 1


class TestAgentMetrics:
    """Tests for AgentMetrics lookups."""

    def test_value_by_key_or_name(self):
        metrics = AgentMetrics(overall=73, health_score=40)
        assert metrics.value(MetricKey.OVERALL) == 73
        assert metrics.value("health_score") == 40

    def test_unknown_metric(self):
        with pytest.raises(InvalidMetricError) as exc:
            AgentMetrics().value("popularity")
        assert exc.value.details["metric"] == "popularity"


class TestCollector:
    """Tests for per-agent record collection."""

    def test_groups_records_by_agent(self):
        agents = [Agent("a1"), Agent("a2")]
        bundles = collect_agent_records(
            agents,
            licenses=[License("a1", "active"), License("a2", "active"), License("a1", "expired")],
            contracts=[], checklist_items=[], tasks=[Task("a2", "open")],
            commissions=[], clients=[], interactions=[], risk_assessments=[],
            outreach=[ProactiveOutreach("ghost")],
        )
        assert [b.agent.id for b in bundles] == ["a1", "a2"]
        assert [l.status for l in bundles[0].licenses] == ["active", "expired"]
        assert bundles[0].tasks == []
        assert len(bundles[1].tasks) == 1
        assert bundles[0].outreach == [] and bundles[1].outreach == []

    def test_none_collection_rejected(self):
        with pytest.raises(MissingCollectionError) as exc:
            collect_agent_records([Agent("a1")], [], [], [], [], [], None, [], [], [])
        assert exc.value.collection == "clients"
