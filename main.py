from rich.pretty import pprint

from keydefs import *


@definer(keymaps=S.global_map)
def bind(options, bindings):
    pprint((dict(options), bindings))


if __name__ == '__main__':
    pprint(bind)
    bind(
        "C-a", S.beginning_of_line,
        "C-e", S.end_of_line,
        SEP,
        S.minibuffer_map, SEP, K.prefix, "C-c",
        EXT, True, ["g", S.abort, K.which_key, "abort"],
        RESET,
        S.help_map, "q", S.quit_window,
    )
