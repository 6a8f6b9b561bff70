"""Runtime layer: retry orchestration and observability."""
