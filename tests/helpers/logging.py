from bounce.logging import Logger, LogLevel


class LoggerStub(Logger):
    """Logger that discards everything."""

    def log(self, _level: LogLevel = LogLevel.INFO, *args, **kwargs) -> None:
        pass

    def push_level(self, level: LogLevel) -> None:
        pass

    def pop_level(self) -> LogLevel:
        return LogLevel.INFO


class RecordingLogger(Logger):
    """Logger that keeps (level, args) of every message."""

    def __init__(self) -> None:
        self.messages: list[tuple[LogLevel, tuple]] = []

    def log(self, level: LogLevel = LogLevel.INFO, *args, **kwargs) -> None:
        self.messages.append((level, args))

    def push_level(self, level: LogLevel) -> None:
        pass

    def pop_level(self) -> LogLevel:
        return LogLevel.INFO

    def text(self, level: LogLevel | None = None) -> str:
        return "\n".join(
            " ".join(str(a) for a in args)
            for msg_level, args in self.messages
            if level is None or msg_level == level
        )


logger_stub = LoggerStub()
