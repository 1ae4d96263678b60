from __future__ import annotations

import io
import unittest
from contextlib import redirect_stderr

from fastapi.testclient import TestClient

from tinybfc.compiler import BrainfuckCompiler
from tinybfc.webui import create_app
from tinybfc.webui.__main__ import main as launcher_main


class CompileApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(create_app())

    def _compile(self, source: str, **payload):
        body = {"source": source}
        body.update(payload)
        return self.client.post("/api/compile", json=body)

    def test_compile_returns_code_and_instructions(self) -> None:
        response = self._compile("+[-]")
        self.assertEqual(response.status_code, 200, response.text)
        data = response.json()
        self.assertEqual(data["code"], BrainfuckCompiler().compile("+[-]"))
        self.assertEqual(data["body"], "\n\t*p += 1;\n\t*p = 0;")
        self.assertEqual(
            data["instructions"],
            [{"kind": "change", "value": 1}, {"kind": "assign", "value": 0}],
        )
        self.assertEqual(data["instruction_count"], 2)

    def test_compile_without_optimization(self) -> None:
        response = self._compile("[-]", optimize=False)
        self.assertEqual(response.status_code, 200, response.text)
        kinds = [item["kind"] for item in response.json()["instructions"]]
        self.assertEqual(kinds, ["loop_start", "change", "loop_end"])

    def test_compile_honours_tape_size(self) -> None:
        response = self._compile("+", tape_size=128)
        self.assertEqual(response.status_code, 200, response.text)
        self.assertIn("new char[128]()", response.json()["code"])

    def test_invalid_tape_size_is_rejected(self) -> None:
        response = self._compile("+", tape_size=0)
        self.assertEqual(response.status_code, 422, response.text)

    def test_malformed_program_reports_position(self) -> None:
        response = self._compile("[[")
        self.assertEqual(response.status_code, 422, response.text)
        detail = response.json()["detail"]
        self.assertEqual(detail["position"], 1)
        self.assertIn("Unmatched", detail["message"])

    def test_permissive_compile_accepts_unbalanced_loops(self) -> None:
        response = self._compile("[", strict=False)
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["instructions"], [{"kind": "loop_start", "value": 0}])


class RunApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(create_app())

    def test_run_returns_output_and_steps(self) -> None:
        response = self.client.post("/api/run", json={"source": "+" * 65 + "."})
        self.assertEqual(response.status_code, 200, response.text)
        data = response.json()
        self.assertEqual(data["output"], "A")
        self.assertEqual(data["steps"], 2)
        self.assertEqual(data["instruction_count"], 2)

    def test_run_feeds_input(self) -> None:
        response = self.client.post("/api/run", json={"source": ",+.", "input": "@"})
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["output"], "A")

    def test_step_limit_conflict(self) -> None:
        response = self.client.post("/api/run", json={"source": "+[]", "max_steps": 10})
        self.assertEqual(response.status_code, 409, response.text)
        self.assertIn("detail", response.json())

    def test_null_step_budget_is_rejected(self) -> None:
        response = self.client.post("/api/run", json={"source": "+[]", "max_steps": None})
        self.assertEqual(response.status_code, 422, response.text)

    def test_default_step_budget_stops_endless_loop(self) -> None:
        response = self.client.post("/api/run", json={"source": "+[]"})
        self.assertEqual(response.status_code, 409, response.text)

    def test_pointer_underflow_is_unprocessable(self) -> None:
        response = self.client.post("/api/run", json={"source": "<"})
        self.assertEqual(response.status_code, 422, response.text)

    def test_malformed_run_is_unprocessable(self) -> None:
        response = self.client.post("/api/run", json={"source": "]"})
        self.assertEqual(response.status_code, 422, response.text)
        self.assertEqual(response.json()["detail"]["position"], 0)


class LauncherTests(unittest.TestCase):
    def test_unknown_log_level_is_rejected(self) -> None:
        buffer = io.StringIO()
        with redirect_stderr(buffer), self.assertRaises(SystemExit) as ctx:
            launcher_main(["--log-level", "verbose"])
        self.assertEqual(ctx.exception.code, 2)
        self.assertIn("invalid choice", buffer.getvalue())


if __name__ == "__main__":
    unittest.main()
