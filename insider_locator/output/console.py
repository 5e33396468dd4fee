from colorama import Fore, Style


class ConsoleColors:
    """ANSI color codes for terminal output"""
    HEADER = Fore.MAGENTA + Style.BRIGHT
    BLUE = Fore.BLUE + Style.BRIGHT
    CYAN = Fore.CYAN + Style.BRIGHT
    GREEN = Fore.GREEN + Style.BRIGHT
    YELLOW = Fore.YELLOW + Style.BRIGHT
    RED = Fore.RED + Style.BRIGHT
    ENDC = Style.RESET_ALL
    BOLD = Style.BRIGHT


class ConsoleFormatter:
    """Formatters for console output"""

    def __init__(self, use_colors: bool = True):
        self.use_colors = use_colors

    def paint(self, msg: str, color: str) -> str:
        if not self.use_colors:
            return msg
        return f"{color}{msg}{ConsoleColors.ENDC}"

    def success(self, msg: str) -> str:
        return self.paint(f"[✓] {msg}", ConsoleColors.GREEN)

    def error(self, msg: str) -> str:
        return self.paint(f"[✗] {msg}", ConsoleColors.RED)

    def warning(self, msg: str) -> str:
        return self.paint(f"[!] {msg}", ConsoleColors.YELLOW)

    def info(self, msg: str) -> str:
        return self.paint(f"[i] {msg}", ConsoleColors.BLUE)

    def header(self, title: str, width: int = 60) -> str:
        rule = "=" * width
        return "\n".join([
            self.paint(rule, ConsoleColors.CYAN),
            self.paint(f"  {title}", ConsoleColors.BOLD),
            self.paint(rule, ConsoleColors.CYAN),
        ])

    def section(self, title: str) -> str:
        return self.paint(title, ConsoleColors.BOLD)

    def field(self, label: str, value: str, width: int = 16) -> str:
        return f"  {label + ':':<{width}} {value}"

    def flag(self, name: str, reason: str = "") -> str:
        line = self.paint(f"[⚠] {name}", ConsoleColors.RED)
        if reason:
            line += f"  {reason}"
        return line
