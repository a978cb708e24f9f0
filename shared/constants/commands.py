class ConsoleCommands:
    """Centralised console command names"""

    HELP = "help"
    QUIT = "quit"

    # Read-only views
    STATS = "stats"
    COUNTERS = "counters"
    TIMERS = "timers"
    GAUGES = "gauges"

    # Destructive
    DEL_COUNTERS = "delcounters"
    DEL_TIMERS = "deltimers"
    DEL_GAUGES = "delgauges"

    @classmethod
    def read_commands(cls) -> list[str]:
        return [cls.STATS, cls.COUNTERS, cls.TIMERS, cls.GAUGES]

    @classmethod
    def delete_commands(cls) -> list[str]:
        return [cls.DEL_COUNTERS, cls.DEL_TIMERS, cls.DEL_GAUGES]

    @classmethod
    def help_order(cls) -> list[str]:
        """Command names in the order `help` lists them."""
        return cls.read_commands() + cls.delete_commands() + [cls.QUIT]

    @classmethod
    def all_commands(cls) -> list[str]:
        return [cls.HELP] + cls.help_order()
