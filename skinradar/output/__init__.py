from skinradar.output.writer import write_snapshots

__all__ = ["write_snapshots"]
