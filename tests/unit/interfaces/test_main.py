"""Tests for the unified entry point dispatcher."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from gerrit_ci.interfaces.main import _VALID_MODES, main


class TestMainDispatch:
    def test_valid_modes_set(self) -> None:
        assert {"check", "pending", "list", "verify", "comment"} == _VALID_MODES

    @pytest.mark.parametrize("mode", sorted(_VALID_MODES))
    @patch("gerrit_ci.interfaces.action.run")
    def test_dispatch_mode(self, mock_run: MagicMock, mode: str) -> None:
        with patch("gerrit_ci.interfaces.main.os.environ", {"INPUT_MODE": mode}):
            main()

        mock_run.assert_called_once_with(mode)

    @patch("gerrit_ci.interfaces.main.os.environ", {})
    @patch("gerrit_ci.interfaces.action.run")
    def test_default_mode_is_check(self, mock_run: MagicMock) -> None:
        main()

        mock_run.assert_called_once_with("check")

    @patch("gerrit_ci.interfaces.main.os.environ", {"INPUT_MODE": "  Verify "})
    @patch("gerrit_ci.interfaces.action.run")
    def test_mode_is_normalized(self, mock_run: MagicMock) -> None:
        main()

        mock_run.assert_called_once_with("verify")

    @patch("gerrit_ci.interfaces.main.os.environ", {"INPUT_MODE": "submit"})
    @patch("gerrit_ci.interfaces.action.run")
    def test_unknown_mode_exits(self, mock_run: MagicMock) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        mock_run.assert_not_called()
