"""Tests for the weekly plan HTTP routes."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.dependencies import get_adaptation_engine, get_plan_orchestrator, get_plan_repository
from app.routes import weekly_plan
from app.services.adaptation_engine import AdaptationEngine
from app.services.fallback_allocator import FallbackAllocator
from app.services.plan_orchestrator import PlanOrchestrator
from conftest import FakeCatalog, FakeProfileClient, FakeRecommendationClient, make_plan


@pytest.fixture
def profiles(profile):
    return FakeProfileClient(profile)


@pytest.fixture
def client(repository, clock, rng, catalog_exercises, profiles):
    catalog = FakeCatalog(catalog_exercises)
    app = FastAPI()
    app.include_router(weekly_plan.router, prefix="/plans")
    app.dependency_overrides[get_plan_repository] = lambda: repository
    app.dependency_overrides[get_plan_orchestrator] = lambda: PlanOrchestrator(
        repository=repository,
        profile_client=profiles,
        recommendation_client=FakeRecommendationClient(),
        fallback_allocator=FallbackAllocator(catalog, rng=rng),
        clock=clock,
    )
    app.dependency_overrides[get_adaptation_engine] = lambda: AdaptationEngine(
        repository=repository, catalog=catalog, clock=clock
    )
    return TestClient(app)


class TestGenerateRoute:

    def test_created_then_reused(self, client):
        first = client.post("/plans/generate", json={"user_id": "42"})
        assert first.status_code == 201
        assert first.json()["regenerated"] is True
        assert first.json()["data"]["generation_method"] == "fallback"

        # Fallback plans are rebuilt on the next request
        second = client.post("/plans/generate", json={"user_id": "42"})
        assert second.status_code == 201

    def test_reused_plan_returns_200(self, client, repository):
        stored = make_plan(["monday", "wednesday", "friday"], fitness_level="intermediate")
        repository.plans[stored.plan_id] = stored

        response = client.post("/plans/generate", json={"user_id": "42"})

        assert response.status_code == 200
        assert response.json()["regenerated"] is False
        assert response.json()["data"]["plan_id"] == str(stored.plan_id)

    def test_profile_failure_is_bad_gateway(self, client, profiles):
        profiles.profile = None

        response = client.post("/plans/generate", json={"user_id": "42"})

        assert response.status_code == 502


class TestReadRoutes:

    def test_current_week_includes_today(self, client):
        response = client.get("/plans/current", params={"user_id": "42"})

        body = response.json()["data"]
        assert response.status_code == 200
        assert body["today_day_name"] == "wednesday"
        assert body["today"]["day_type"] == "workout"

    def test_missing_week_is_404(self, client):
        response = client.get("/plans/week/2026-11-03", params={"user_id": "42"})

        assert response.status_code == 404


class TestDayRoutes:

    def test_complete_and_skip(self, client, repository):
        stored = make_plan(["monday", "friday"])
        repository.plans[stored.plan_id] = stored

        completed = client.post(f"/plans/{stored.plan_id}/complete-day", json={"day": "monday"})
        skipped = client.post(
            f"/plans/{stored.plan_id}/skip-day", json={"day": "friday", "reason": "sick"}
        )

        assert completed.status_code == 200
        assert skipped.status_code == 200
        assert skipped.json()["data"]["workouts_completed"] == 1
        assert skipped.json()["data"]["workouts_skipped"] == 1

    def test_rest_day_is_400(self, client, repository):
        stored = make_plan(["monday"])
        repository.plans[stored.plan_id] = stored

        response = client.post(f"/plans/{stored.plan_id}/complete-day", json={"day": "sunday"})

        assert response.status_code == 400

    def test_preferred_days_update(self, client, repository):
        stored = make_plan(["monday", "saturday"])
        repository.plans[stored.plan_id] = stored

        response = client.put(
            f"/plans/{stored.plan_id}/preferred-days",
            json={"preferred_workout_days": ["monday", "thursday"]},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["changes"]["removed"] == ["saturday"]
        assert body["changes"]["added"] == ["thursday"]
        assert body["changes"]["reallocated_exercises"] == 4
        assert body["data"]["days"]["saturday"]["day_type"] == "rest"

    def test_preferred_days_unknown_plan(self, client):
        response = client.put(
            "/plans/00000000-0000-0000-0000-000000000000/preferred-days",
            json={"preferred_workout_days": ["monday"]},
        )

        assert response.status_code == 404
