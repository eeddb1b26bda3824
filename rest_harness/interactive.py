"""Interactive credential prompts for terminal use.

The username and one-time code are echoed; the password is read with
getpass and never shown.
"""

from __future__ import annotations

import getpass
import sys
from typing import TextIO

from rest_harness.credentials import UserPass, UserPassTwoFactor


def prompt_text(prompt: str, stream: TextIO | None = None) -> str:
    """Prompt for text echoed in the terminal. Do not use for secrets."""
    stream = stream or sys.stdout
    stream.write(prompt)
    stream.flush()
    return sys.stdin.readline().rstrip("\r\n")


def prompt_username_password(stream: TextIO | None = None) -> tuple[str, str]:
    """Prompt for a username (echoed) and a password (masked)."""
    username = prompt_text("Username: ", stream)
    password = getpass.getpass("Password: ", stream=stream)
    return username, password


def prompt_two_factor(stream: TextIO | None = None) -> str:
    """Prompt for a one-time two-factor code."""
    return prompt_text("2FA: ", stream)


def prompt_credentials(
    need_2fa: bool = False,
    stream: TextIO | None = None,
) -> UserPass | UserPassTwoFactor:
    """Interactively collect username/password credentials.

    Args:
        need_2fa: Also ask for a one-time code.
        stream: Where prompts are written (defaults to stdout).

    Returns:
        UserPassTwoFactor if need_2fa, UserPass otherwise.

    """
    stream = stream or sys.stdout
    stream.write("Please enter credentials to proceed\n")
    username, password = prompt_username_password(stream)

    if need_2fa:
        return UserPassTwoFactor(username, password, prompt_two_factor(stream))
    return UserPass(username, password)
