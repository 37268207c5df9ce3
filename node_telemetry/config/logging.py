import logging
import traceback


class LoggerAdapter(logging.LoggerAdapter):
    def __init__(self, logger, extra):
        super().__init__(logger, extra)
        self.logger = logger
        self.extra = extra

    def process(self, msg, kwargs):
        # Keep the component name from the adapter unless the call overrides it
        extra = dict(self.extra)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs

    def log(self, level, msg, *args, **kwargs):
        if kwargs.get("exc_info"):
            exc_info = kwargs["exc_info"]
            if isinstance(exc_info, BaseException):
                exc_info = (type(exc_info), exc_info, exc_info.__traceback__)
            if isinstance(exc_info, tuple):
                msg += "\n" + "".join(
                    traceback.format_exception(exc_info[0], exc_info[1], exc_info[2])
                )
                kwargs["exc_info"] = None

        super().log(level, msg, *args, **kwargs)


class_color_map = {
    "manager": {
        "INFO": "light_blue",
        "DEBUG": "cyan",
        "ERROR": "red",
        "WARNING": "yellow",
        "CRITICAL": "red,bg_white",
    },
    "sampler": {
        "INFO": "green",
        "DEBUG": "cyan",
        "ERROR": "red",
        "WARNING": "yellow",
        "CRITICAL": "red,bg_white",
    },
    "registry": {
        "INFO": "purple",
        "DEBUG": "cyan",
        "ERROR": "red",
        "WARNING": "yellow",
        "CRITICAL": "red,bg_white",
    },
}

