import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional


def utc_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


@dataclass
class RunLogger:
    """
    Append-only JSONL log of one audit run.

    One JSON object per line in log_path. `subject` is what is being audited
    (usually the proposed title). An `end` that follows a `start` for the same
    stage carries the elapsed milliseconds.
    """
    run_id: str
    subject: str
    log_path: Path
    _started: dict[str, float] = field(default_factory=dict, init=False, repr=False)

    def _write(self, stage: str, event: str, status: str, **fields: Any) -> None:
        payload = {
            "ts": utc_iso(),
            "run_id": self.run_id,
            "subject": self.subject,
            "stage": stage,
            "event": event,
            "status": status,
            **fields,
        }
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        with self.log_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")

    def _elapsed_ms(self, stage: str) -> Optional[int]:
        started = self._started.pop(stage, None)
        if started is None:
            return None
        return int((time.perf_counter() - started) * 1000)

    def start(self, stage: str, input: Any) -> None:
        self._started[stage] = time.perf_counter()
        self._write(stage, "start", "ok", input=input)

    def end(self, stage: str, output: Any, metrics: Optional[dict[str, Any]] = None) -> None:
        fields: dict[str, Any] = {"output": output, "metrics": metrics or {}}
        elapsed = self._elapsed_ms(stage)
        if elapsed is not None:
            fields["elapsed_ms"] = elapsed
        self._write(stage, "end", "ok", **fields)

    def error(self, stage: str, input: Any, err: Exception) -> None:
        self._elapsed_ms(stage)
        self._write(
            stage,
            "error",
            "error",
            input=input,
            error={"type": err.__class__.__name__, "message": str(err)},
        )
