"""End-to-end CLI runs against a mocked Rick and Morty API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx
import pytest
import respx
import structlog
from click.testing import CliRunner
from fakes import BASE_URL, character_payload, episode_payload, location_payload, page_payload

from rickmorty.cli import cli

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rickmorty.config import Settings


@pytest.fixture()
def runner(monkeypatch: pytest.MonkeyPatch) -> Iterator[CliRunner]:
    # Keep log output out of the captured command output
    monkeypatch.setattr(
        "rickmorty.cli._setup_logging",
        lambda settings: structlog.configure(
            wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL)
        ),
    )
    yield CliRunner()
    structlog.reset_defaults()


@pytest.fixture()
def api() -> Iterator[respx.MockRouter]:
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as router:
        router.get("/episode", name="episodes").mock(
            return_value=httpx.Response(
                200,
                json=page_payload(
                    [
                        episode_payload(1, [1, 2], name="Pilot", episode="S01E01"),
                        episode_payload(12, [2], name="The Wedding Squanchers", episode="S02E10"),
                    ]
                ),
            )
        )
        router.get("/character/1,2").mock(
            return_value=httpx.Response(
                200,
                json=[
                    character_payload(1, name="Rick Sanchez"),
                    character_payload(2, name="Morty Smith"),
                ],
            )
        )
        router.get("/character/2").mock(
            return_value=httpx.Response(200, json=character_payload(2, name="Morty Smith"))
        )
        router.get("/character/9999").mock(return_value=httpx.Response(404))
        router.get("/location/1").mock(return_value=httpx.Response(200, json=location_payload(1)))
        yield router


class TestCli:
    def test_episodes(self, runner: CliRunner, api: respx.MockRouter) -> None:
        result = runner.invoke(cli, ["episodes"])
        assert result.exit_code == 0, result.output
        assert "S01E01  Pilot" in result.output
        assert "S02E10  The Wedding Squanchers" in result.output

    def test_episodes_filtered_by_season(self, runner: CliRunner, api: respx.MockRouter) -> None:
        result = runner.invoke(cli, ["episodes", "--season", "2"])
        assert result.exit_code == 0, result.output
        assert "Pilot" not in result.output
        assert "The Wedding Squanchers" in result.output

    def test_characters_sorted_by_name(self, runner: CliRunner, api: respx.MockRouter) -> None:
        result = runner.invoke(cli, ["characters", "1"])
        assert result.exit_code == 0, result.output
        assert result.output.index("Morty Smith") < result.output.index("Rick Sanchez")

    def test_characters_for_unknown_episode(
        self, runner: CliRunner, api: respx.MockRouter
    ) -> None:
        result = runner.invoke(cli, ["characters", "77"])
        assert result.exit_code == 1
        assert "Episode not found: 77" in result.output

    def test_character(self, runner: CliRunner, api: respx.MockRouter) -> None:
        result = runner.invoke(cli, ["character", "2"])
        assert result.exit_code == 0, result.output
        assert "Morty Smith [Alive]" in result.output
        assert "origin: Earth (C-137)" in result.output

    def test_character_not_found(self, runner: CliRunner, api: respx.MockRouter) -> None:
        result = runner.invoke(cli, ["character", "9999"])
        assert result.exit_code == 1
        assert "Character not found: 9999" in result.output

    def test_location(self, runner: CliRunner, api: respx.MockRouter) -> None:
        result = runner.invoke(cli, ["location", "1"])
        assert result.exit_code == 0, result.output
        assert "Earth (C-137)" in result.output
        assert "residents: 2" in result.output

    def test_random(self, runner: CliRunner, api: respx.MockRouter) -> None:
        result = runner.invoke(cli, ["random", "1", "12"])
        assert result.exit_code == 0, result.output
        assert "picked from 2 cached characters" in result.output

    def test_network_failure_reported(self, runner: CliRunner, api: respx.MockRouter) -> None:
        api["episodes"].mock(side_effect=httpx.ConnectError("Connection refused"))
        result = runner.invoke(cli, ["episodes"])
        assert result.exit_code == 1
        assert "Connection refused" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("rickmorty, version ")

    def test_log_level_option_overrides_settings(
        self,
        runner: CliRunner,
        api: respx.MockRouter,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        seen: list[Settings] = []
        monkeypatch.setattr("rickmorty.cli._setup_logging", seen.append)
        monkeypatch.setenv("RICKMORTY__LOGGING__LEVEL", "ERROR")

        result = runner.invoke(cli, ["--log-level", "debug", "location", "1"])

        assert result.exit_code == 0, result.output
        assert [s.logging.level for s in seen] == ["DEBUG"]
