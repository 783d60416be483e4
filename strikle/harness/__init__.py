from .core import run_case, run_batch, choose_targets, summarize, simulate_feedback
from .io import write_csv, write_manifest

__all__ = ["run_case", "run_batch", "choose_targets", "summarize", "simulate_feedback",
           "write_csv", "write_manifest"]
