from __future__ import annotations

import pytest

from lyricbar.i18n import set_lang


@pytest.fixture(autouse=True)
def _english_strings():
    set_lang("EN")
    yield
    set_lang("EN")
