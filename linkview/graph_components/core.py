from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Change(Enum):

    NEW = "new"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class Palette:

    new: Optional[str] = "blue"
    modified: Optional[str] = "red"

    def colour_for(self, change: Optional[Change]) -> Optional[str]:
        if change is Change.NEW:
            return self.new
        if change is Change.MODIFIED:
            return self.modified
        return None

    @classmethod
    def for_style(cls, style: str) -> "Palette":
        key = style.lower().strip()
        if key in {"default", "colour", "color"}:
            return cls()
        if key in {"mono", "grey", "gray"}:
            return cls(new="grey40", modified="black")
        if key in {"none", "off", "plain"}:
            return cls(new=None, modified=None)
        raise ValueError(f"Unknown palette style: {style}")


@dataclass
class BoxChars:

    top_left: str = "╭"
    top_right: str = "╮"
    bottom_left: str = "╰"
    bottom_right: str = "╯"

    horizontal: str = "─"
    vertical: str = "│"

    tee_down: str = "┬"
    tee_up: str = "┴"
    tee_right: str = "├"
    tee_left: str = "┤"
    cross: str = "┼"

    arrow_down: str = "▼"
    arrow_up: str = "▲"

    @classmethod
    def for_style(cls, style: str) -> "BoxChars":
        key = style.lower().strip()
        if key in {"rounded", "round", "modern"}:
            return cls()
        if key in {"square", "line", "box"}:
            return cls(
                top_left="┌",
                top_right="┐",
                bottom_left="└",
                bottom_right="┘",
            )
        if key in {"ascii", "plain"}:
            return cls(
                top_left="+",
                top_right="+",
                bottom_left="+",
                bottom_right="+",
                horizontal="-",
                vertical="|",
                tee_down="+",
                tee_up="+",
                tee_right="+",
                tee_left="+",
                cross="+",
                arrow_down="v",
                arrow_up="^",
            )
        raise ValueError(f"Unknown box style: {style}")
