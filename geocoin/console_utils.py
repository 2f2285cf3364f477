from colorama import Fore, Style
import logging

logger = logging.getLogger(__name__)

COLOR_MAP = {
    "cyan": Fore.CYAN,
    "yellow": Fore.YELLOW,
    "red": Fore.RED,
    "green": Fore.GREEN,
    "magenta": Fore.MAGENTA,
    "white": Fore.WHITE,
}


def colorize(text, color="white"):
    return f"{COLOR_MAP.get(color, Fore.WHITE)}{text}{Style.RESET_ALL}"


def console_print(text, color="white", flush=False):
    print(colorize(text, color), flush=flush)
    logger.debug(f"Console print: {text}")


def console_input(prompt, color="white"):
    try:
        return input(colorize(prompt, color))
    except EOFError:
        logger.debug("Console input closed")
        return None
