"""
HUMAN logging level -- readable install progress.

Custom level between INFO (20) and WARNING (30).
Does not indicate severity -- it marks the high-level steps the user
wants to follow (download, install target) without technical noise.

Hierarchy:
    debug  (10) -> HTTP details, archive members
    info   (20) -> System operations (config loaded, archive opened)
    human  (25) -> * What the installer does: download, install target
    warn   (30) -> Non-fatal problems (skill missing from archive)
    error  (40) -> Errors
"""

import logging

import structlog

# Custom level: between INFO (20) and WARNING (30)
HUMAN = 25
logging.addLevelName(HUMAN, "HUMAN")


# Inject the .human() method into Python's Logger class
def _human_method(self, message, *args, **kwargs):
    if self.isEnabledFor(HUMAN):
        self._log(HUMAN, message, args, **kwargs)


logging.Logger.human = _human_method

# Register the level in structlog to avoid KeyError: 25 in BoundLogger.log()
structlog.stdlib.LEVEL_TO_NAME[HUMAN] = "human"
