"""Tests for the workflow and run services against an in-memory database."""

from datetime import datetime

import pytest

from vyntra.core.config import Settings
from vyntra.core.exceptions import (
    EditRejectedError,
    RunLimitExceededError,
    RunNotFoundError,
    WorkflowNotFoundError,
    WorkflowValidationError,
)
from vyntra.engine.validator import require_valid_document
from vyntra.repositories import RecordRepository, RunRepository, WorkflowRepository
from vyntra.services.run_service import RunService, month_start
from vyntra.services.workflow_service import WorkflowService

from .builders import FakeCompletion, branching_document, scenario_a_document, scenario_b_document


@pytest.fixture
def workflow_service(session):
    return WorkflowService(WorkflowRepository(session))


def make_run_service(session, completion=None, **config):
    return RunService(
        WorkflowRepository(session),
        RunRepository(session),
        RecordRepository(session),
        completion or FakeCompletion(),
        config=Settings(**config),
    )


class TestWorkflowService:
    async def test_create_and_get(self, workflow_service):
        created = await workflow_service.create_workflow(scenario_a_document(), prompt="triage leads")

        assert created.id == "wf_scenario_a"
        assert created.prompt == "triage leads"

        fetched = await workflow_service.get_workflow("wf_scenario_a")
        assert fetched.document == created.document
        assert fetched.tags == ["va"]

    async def test_create_rejects_invalid_documents(self, workflow_service):
        raw = scenario_a_document()
        raw["workflow"]["entry_node_id"] = "n2"

        with pytest.raises(WorkflowValidationError):
            await workflow_service.create_workflow(raw)
        assert await workflow_service.list_workflows() == []

    async def test_create_rejects_duplicate_ids(self, workflow_service):
        await workflow_service.create_workflow(scenario_a_document())

        with pytest.raises(WorkflowValidationError) as exc_info:
            await workflow_service.create_workflow(scenario_a_document())
        assert exc_info.value.errors == ["workflow.id: Workflow wf_scenario_a already exists."]

    async def test_update_requires_matching_id(self, workflow_service):
        await workflow_service.create_workflow(scenario_a_document())

        with pytest.raises(WorkflowValidationError):
            await workflow_service.update_workflow("wf_scenario_a", branching_document())

    async def test_update_and_list(self, workflow_service):
        await workflow_service.create_workflow(scenario_a_document())
        raw = scenario_a_document()
        raw["workflow"]["name"] = "Renamed"

        updated = await workflow_service.update_workflow("wf_scenario_a", raw)
        listed = await workflow_service.list_workflows()

        assert updated.name == "Renamed"
        assert [(w.id, w.name, w.node_count) for w in listed] == [("wf_scenario_a", "Renamed", 4)]

    async def test_delete(self, workflow_service):
        await workflow_service.create_workflow(scenario_a_document())

        assert await workflow_service.delete_workflow("wf_scenario_a")
        with pytest.raises(WorkflowNotFoundError):
            await workflow_service.delete_workflow("wf_scenario_a")

    async def test_edit_is_stored(self, workflow_service):
        await workflow_service.create_workflow(scenario_a_document())

        response = await workflow_service.edit_workflow("wf_scenario_a", "add delay 10 seconds")

        assert response.ok
        stored = await workflow_service.get_stored("wf_scenario_a")
        assert stored.document.workflow.get_node("n5").config["seconds"] == 10

    async def test_rejected_edit_leaves_document(self, workflow_service):
        await workflow_service.create_workflow(scenario_a_document())

        with pytest.raises(EditRejectedError) as exc_info:
            await workflow_service.edit_workflow("wf_scenario_a", "connect n4 to n2")

        assert exc_info.value.message == "Edit rejected by workflow validator."
        assert exc_info.value.errors
        stored = await workflow_service.get_stored("wf_scenario_a")
        assert len(stored.document.workflow.edges) == 3


class TestRunService:
    async def _store(self, session, raw):
        await WorkflowRepository(session).create(require_valid_document(raw))

    async def test_simulated_run_is_persisted(self, session):
        await self._store(session, scenario_a_document())
        service = make_run_service(session)

        response = await service.run_workflow("wf_scenario_a")

        assert response.ok
        assert response.steps_count == 4
        assert response.output_json["category"] == "lead"

        detail = await service.get_run(response.run_id)
        assert detail.status == "success"
        assert detail.mode == "simulate"
        assert detail.input_json["source"] == "run-simulate"
        assert [step.node_id for step in detail.steps] == ["n1", "n2", "n3", "n4"]

    async def test_live_run_writes_records(self, session):
        await self._store(session, scenario_a_document())
        service = make_run_service(session, completion=FakeCompletion(["Short summary."]))

        response = await service.run_workflow("wf_scenario_a", mode="live")

        assert response.ok
        assert response.output_json["summary"] == "Short summary."
        assert response.output_json["db_save"]["inserted_id"]
        detail = await service.get_run(response.run_id)
        assert detail.steps[2].fallback_used is True

    async def test_failed_live_run_is_persisted(self, session):
        await self._store(session, scenario_b_document())
        service = make_run_service(session)

        response = await service.run_workflow("wf_scenario_b", mode="live")

        assert not response.ok
        assert response.error == "Run failed"
        assert response.details == "db_save unsupported table: definitely_missing_table"

        runs = await service.list_runs("wf_scenario_b")
        assert len(runs) == 1
        assert runs[0].id == response.run_id
        assert runs[0].status == "failed"
        assert runs[0].steps_count == 2

    async def test_unknown_workflow(self, session):
        with pytest.raises(WorkflowNotFoundError):
            await make_run_service(session).run_workflow("wf_missing")

    async def test_monthly_limit(self, session):
        await self._store(session, branching_document())
        service = make_run_service(session, run_monthly_limit=1)

        await service.run_workflow("wf_branching")
        with pytest.raises(RunLimitExceededError) as exc_info:
            await service.run_workflow("wf_branching")

        assert exc_info.value.limit == 1
        assert exc_info.value.period_start.endswith("-01T00:00:00")
        assert len(await service.list_runs()) == 1

    async def test_simulate_unsaved_document(self, session):
        response = await make_run_service(session).simulate(branching_document(), {"score": 0.1})

        assert response.status == "success"
        assert [step.node_id for step in response.steps] == ["n1", "n2", "n4"]
        assert await make_run_service(session).list_runs() == []

    async def test_unknown_run(self, session):
        with pytest.raises(RunNotFoundError):
            await make_run_service(session).get_run("missing")


def test_month_start():
    assert month_start(datetime(2026, 3, 17, 8, 30, 5, 12)) == datetime(2026, 3, 1)
