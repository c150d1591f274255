"""A hand-written state machine using the Delegate end-of-input policy.

Reads double-quoted strings separated by anything. An unterminated
string at end-of-input is reported through the controller.
"""

from runeflow import Delegate, MachineConfig, StateMachine, TokenizeError


class QuotedStrings:
    def __init__(self) -> None:
        self.chars: list[str] | None = None
        self.value = ""

    def config(self) -> MachineConfig:
        return MachineConfig(self.outside, eof=Delegate(self.at_eof))

    def outside(self, ctrl, rune):
        if rune == '"':
            self.chars = []
            return self.inside
        return self.outside

    def inside(self, ctrl, rune):
        if rune == '"':
            self.value = "".join(self.chars)
            self.chars = None
            return None
        self.chars.append(rune)
        return self.inside

    def at_eof(self, ctrl):
        if self.chars is not None:
            ctrl.set_error(TokenizeError(f"unterminated string {''.join(self.chars)!r}"))
        return None


strings = QuotedStrings()
machine = StateMachine('say "hello" and "goodbye" then "oops', strings.config())
while machine.run():
    print(strings.value)

print("error:", machine.err())
