from __future__ import annotations

from dataclasses import dataclass

QUIT_TOKEN = "/quit"

WELCOME_LINE = "Welcome! Enter your name:"


def is_quit_command(line: str) -> bool:
    return line.strip().lower() == QUIT_TOKEN


@dataclass
class GreetingLine:
    name: str

    def render(self) -> str:
        return f"Hi {self.name}! You can start typing. Type {QUIT_TOKEN} to exit."


@dataclass
class JoinNotice:
    name: str

    def render(self) -> str:
        return f"🔔 {self.name} joined the chat."


@dataclass
class LeaveNotice:
    name: str

    def render(self) -> str:
        return f"👋 {self.name} left the chat."


@dataclass
class ChatLine:
    name: str
    text: str

    def render(self) -> str:
        return f"🗨️ {self.name}: {self.text}"
