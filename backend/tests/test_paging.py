from bountyhub.core.paging import build_paged_response, page_window


def test_page_window_clamps_input():
    assert page_window(None, None) == (1, 10, 0)
    assert page_window(3, 20) == (3, 20, 40)
    assert page_window(0, 1000) == (1, 100, 0)
    assert page_window(-2, -5) == (1, 1, 0)


def test_build_paged_response_counts_pages():
    payload = build_paged_response(items=[1, 2, 3], total=21, page=1, limit=10, serializer=lambda x: {"n": x})
    assert payload["items"] == [{"n": 1}, {"n": 2}, {"n": 3}]
    assert payload["pages"] == 3
    assert build_paged_response(items=[], total=0, page=1, limit=10)["pages"] == 0
