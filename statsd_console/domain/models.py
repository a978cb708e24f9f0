from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AggregatorStats(BaseModel):
    """Health of the ingestion/flush pipeline.

    Written only by the pipeline (under the aggregator lock); the console
    reads it for the `stats` command.
    """

    bad_lines: int = 0
    last_message: Optional[datetime] = None
    last_flush: Optional[datetime] = None
    last_flush_error: str = ""


class CommandResult(BaseModel):
    """Outcome of one console command.

    Fields:
        text: Response written back to the client verbatim.
        close: Close the connection after writing `text` (no prompt follows).
    """

    text: str
    close: bool = False
