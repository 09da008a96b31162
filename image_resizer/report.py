"""Summary models describing a finished resize batch."""

from pathlib import Path
from typing import List, Literal

from pydantic import BaseModel


class OutputRecord(BaseModel):
    """One written output file."""

    base_name: str
    source_path: Path
    output_path: Path
    width: int
    height: int


class BatchReport(BaseModel):
    """Result of a completed resize batch."""

    mode: Literal["sequential", "concurrent"]
    scale: float
    source_dir: Path
    dest_dir: Path
    outputs: List[OutputRecord] = []
    elapsed_seconds: float = 0.0

    model_config = {
        "validate_assignment": True,
    }

    @property
    def count(self) -> int:
        return len(self.outputs)

    def output_names(self) -> List[str]:
        """Base names of all written files, in processing order."""
        return [record.base_name for record in self.outputs]

    def save_to_file(self, file_path: Path) -> None:
        """Save the report as JSON."""
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
