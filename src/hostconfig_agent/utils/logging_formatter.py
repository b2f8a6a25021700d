"""
Log formatting for hostconfig-agent.

Devices run in whatever timezone they were flashed with, so every entry is
stamped in UTC with millisecond precision.
"""

import datetime
import logging


class UTCTimestampFormatter(logging.Formatter):
    """
    Prefixes each record with the time it was created, in UTC.

    Format: [YYYY-MM-DD HH:MM:SS.sss UTC] <formatted record>
    """

    def formatTime(self, record, datefmt=None):
        created = datetime.datetime.fromtimestamp(
            record.created, tz=datetime.timezone.utc
        )
        if datefmt:
            return created.strftime(datefmt)
        return f"{created:%Y-%m-%d %H:%M:%S}.{int(record.msecs):03d}"

    def format(self, record):
        return f"[{self.formatTime(record)} UTC] {super().format(record)}"
