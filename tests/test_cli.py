"""
CLI integration tests

Runs every inspection command against the built-in sample organization
using Typer's CliRunner.

Fun fact: Typer is built on Click, whose name started life as a
contraction of "Command Line Interface Creation Kit".
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from authority_engine.cli.main import app


@pytest.fixture
def runner():
    """Typer CLI test runner"""
    return CliRunner()


@pytest.fixture
def structure_file(runner, tmp_path) -> Path:
    """Sample structure exported to disk (carries no personas)"""
    path = tmp_path / "structure.json"
    result = runner.invoke(app, ["export-sample", "--out", str(path)])
    assert result.exit_code == 0
    return path


def test_tree_lists_hierarchy(runner):
    result = runner.invoke(app, ["tree"])

    assert result.exit_code == 0
    assert "Nebula Industries AI [DRAFT] ceiling 3" in result.stdout
    assert "  Financial Operations (dom-fin) ceiling 2" in result.stdout
    assert "    Reconciler X (agt-fin-recon) effective authority 2" in result.stdout


def test_tree_json(runner):
    result = runner.invoke(app, ["tree", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["organization"]["id"] == "org-001"
    assert len(data["agents"]) == 6


def test_agent_shows_derivation(runner):
    result = runner.invoke(app, ["agent", "agt-cust-triage"])

    assert result.exit_code == 0
    assert "Effective authority: 1" in result.stdout
    assert "ORGANIZATION: Nebula Industries AI (ceiling 3)" in result.stdout
    assert "DOMAIN: Customer Experience (ceiling 1)" in result.stdout
    assert "Blocked:" in result.stdout


def test_agent_json(runner):
    result = runner.invoke(app, ["agent", "agt-fin-recon", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["effective_authority_level"] == 2


def test_unknown_agent_exits_with_error(runner):
    result = runner.invoke(app, ["agent", "agt-nope"])

    assert result.exit_code == 1
    assert "Agent agt-nope not found" in result.output


def test_actions_lists_catalogue(runner):
    result = runner.invoke(app, ["actions", "agt-fin-recon"])

    assert result.exit_code == 0
    assert "Action surface:" in result.stdout
    assert "generic_update_record: Update record [ALLOWED]" in result.stdout
    assert "generic_execute_action: Execute system action [BLOCKED]" in result.stdout


def test_actions_json(runner):
    result = runner.invoke(app, ["actions", "agt-fin-recon", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert len(data["action_surface"]["actions"]) == 5
    assert [a["id"] for a in data["do_actions"]["actions"]][0] == "generic_read_info"


def test_verdict(runner):
    result = runner.invoke(app, ["verdict", "agt-cust-triage", "generic_make_decision"])

    assert result.exit_code == 0
    assert "Decision: ESCALATION_REQUIRED (MEDIUM)" in result.stdout
    assert "Summary: Triage Mate would need approval to make autonomous decision." in result.stdout
    assert "RUNTIME: No execution is permitted in the current system phase." in result.stdout
    assert "Escalation: Domain Administrator" in result.stdout


def test_verdict_unknown_action(runner):
    result = runner.invoke(app, ["verdict", "agt-fin-recon", "ops_deploy_production"])

    assert result.exit_code == 1
    assert "Action ops_deploy_production not found for agent agt-fin-recon" in result.output


def test_readiness(runner):
    result = runner.invoke(app, ["readiness", "agt-tech-mon", "generic_update_record"])

    assert result.exit_code == 0
    assert "Readiness: BLOCKED_HARD" in result.stdout
    assert "✗ Action surface compatibility: This action requires WRITE surface, but agent has READ." in (
        result.stdout
    )


def test_ethics_blocked(runner):
    result = runner.invoke(app, ["ethics", "agt-cust-triage", "generic_escalate", "--describe"])

    assert result.exit_code == 0
    assert "Ethics: ETHICS_BLOCKED" in result.stdout
    assert "This restriction cannot be overridden." in result.stdout
    assert "Persona: Ticket Router" in result.stdout
    assert "Frame: 2 EAPP principle(s), 1 immutable commitment(s), 2 operational constraint(s)" in (
        result.stdout
    )


def test_ethics_json(runner):
    result = runner.invoke(app, ["ethics", "agt-fin-recon", "generic_update_record", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["verdict"] == "ETHICS_ALLOWED"


def test_ethics_without_persona(runner, structure_file):
    result = runner.invoke(
        app, ["ethics", "agt-fin-recon", "generic_update_record", "--data", str(structure_file)]
    )

    assert result.exit_code == 0
    assert "No persona registered for agt-fin-recon" in result.stdout


def test_data_file_round_trips(runner, structure_file):
    result = runner.invoke(app, ["agent", "agt-fin-recon", "--data", str(structure_file), "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["effective_authority_level"] == 2


def test_missing_data_file(runner, tmp_path):
    result = runner.invoke(app, ["tree", "--data", str(tmp_path / "missing.json")])

    assert result.exit_code == 1
    assert "Structure file not found" in result.output
