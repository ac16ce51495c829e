import hashlib
from typing import Callable, Sequence

from climate_story_constants import get_scenario_label
from climate_story_helpers import dedupe_preserve_order, slugify


def pill_key(namespace: str, options: Sequence[str], option: str) -> str:
    opts = dedupe_preserve_order(options or [])
    opts_hash = hashlib.md5(str(sorted(opts)).encode()).hexdigest()[:8]
    return f"{namespace}_pill_{opts_hash}_{slugify(option)}"


def sync_pills(session_state, namespace: str, options: Sequence[str], state):
    """Copy the committed selection into the pill widgets before they are drawn."""
    for opt in dedupe_preserve_order(options or []):
        session_state[pill_key(namespace, options, opt)] = state.is_active(opt)


def scenario_pills(
        container,
        options: Sequence[str],
        on_toggle: Callable[[str], None],
        columns: int = 4,
        namespace: str = "scen"
):
    """One toggle per scenario; each flip calls on_toggle(scenario)."""
    opts = dedupe_preserve_order(options or [])
    cols = container.columns(max(1, min(columns, len(opts) or 1)))

    for i, opt in enumerate(opts):
        with cols[i % len(cols)]:
            container.toggle(
                get_scenario_label(opt),
                key=pill_key(namespace, options, opt),
                on_change=on_toggle,
                args=(opt,),
            )
