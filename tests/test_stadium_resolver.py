import requests

from conftest import FakeResponse, FakeSession
from matchfinder.core.config import Settings
from matchfinder.core.errors import Found, NotFound
from matchfinder.services.stadium_resolver import StadiumResolver, extract_stadium_from_html

MAN_UTD_HTML = """
<table class="infobox vcard">
  <tr><th>Full name</th><td>Manchester United Football Club</td></tr>
  <tr><th>Ground</th><td><a href="/wiki/Old_Trafford">Old Trafford</a><sup>[1]</sup><br/>Capacity: 74,310</td></tr>
  <tr><th>Stadium</th><td>Somewhere Else</td></tr>
</table>
"""

NO_GROUND_HTML = """
<table class="infobox">
  <tr><th>Full name</th><td>Arsenal Football Club</td></tr>
  <tr><th>Owner</th><td>KSE</td></tr>
</table>
"""


def wiki_handler(search_hits, page_html):
    """search_hits: {query: title}. Any other query has no hits."""
    def handler(url, params):
        if params.get("action") == "query":
            title = search_hits.get(params["srsearch"])
            results = [{"title": title}] if title else []
            return FakeResponse(payload={"query": {"search": results}})
        if params.get("action") == "parse":
            return FakeResponse(payload={"parse": {"title": params["page"], "text": {"*": page_html}}})
        return FakeResponse(404, text="unexpected")
    return handler


def test_extract_first_matching_row_cleaned():
    assert extract_stadium_from_html(MAN_UTD_HTML) == "Old Trafford"


def test_extract_header_is_case_insensitive_and_accepts_synonyms():
    html = '<table class="infobox"><tr><th> Home Ground </th><td>Anfield [2]</td></tr></table>'
    assert extract_stadium_from_html(html) == "Anfield"

    html = '<table class="infobox"><tr><th>Ground(s)</th><td>Camp Nou\nCapacity: 99,354</td></tr></table>'
    assert extract_stadium_from_html(html) == "Camp Nou"


def test_extract_without_infobox_or_row():
    assert extract_stadium_from_html("<p>No table here</p>") is None
    assert extract_stadium_from_html(NO_GROUND_HTML) is None


def test_resolve_stadium_tries_variants_in_order(settings):
    session = FakeSession(wiki_handler({"Man Utd (football club)": "Manchester United F.C."}, MAN_UTD_HTML))
    resolver = StadiumResolver(settings, session=session)

    result = resolver.resolve_stadium("Man Utd")

    assert result == Found("Old Trafford")
    searched = [c["params"]["srsearch"] for c in session.calls if c["params"].get("action") == "query"]
    assert searched == ["Man Utd ", "Man Utd Football Club", "Man Utd (football club)"]
    parse_call = session.calls[-1]["params"]
    assert parse_call["page"] == "Manchester United F.C."
    assert parse_call["format"] == "json"


def test_resolve_stadium_no_search_hits(settings):
    session = FakeSession(wiki_handler({}, MAN_UTD_HTML))
    result = StadiumResolver(settings, session=session).resolve_stadium("Nobody United")

    assert isinstance(result, NotFound)
    # all six variants tried, no page fetched
    assert len(session.calls) == 6


def test_resolve_stadium_without_ground_row_is_not_found(settings):
    session = FakeSession(wiki_handler({"Arsenal ": "Arsenal F.C."}, NO_GROUND_HTML))
    result = StadiumResolver(settings, session=session).resolve_stadium("Arsenal")
    assert isinstance(result, NotFound)


def test_resolve_stadium_http_failure_is_not_found(settings):
    def boom(url, params):
        raise requests.ConnectionError("wiki down")

    result = StadiumResolver(settings, session=FakeSession(boom)).resolve_stadium("Arsenal")
    assert isinstance(result, NotFound)


def test_resolve_stadium_server_error_is_not_found(settings):
    session = FakeSession(lambda url, params: FakeResponse(503, text="busy"))
    result = StadiumResolver(settings, session=session).resolve_stadium("Arsenal")
    assert isinstance(result, NotFound)


def test_resolve_coordinates(settings):
    payload = {"results": [{"geometry": {"lat": 53.4631, "lng": -2.2913}}]}
    session = FakeSession(lambda url, params: FakeResponse(payload=payload))

    result = StadiumResolver(settings, session=session).resolve_coordinates("Old Trafford")

    assert isinstance(result, Found)
    assert result.value.lat == 53.4631
    assert result.value.lon == -2.2913
    call = session.calls[0]
    assert call["url"] == "https://geo.test/json"
    assert call["params"] == {"key": "geo-key", "q": "Old Trafford", "limit": 1}


def test_resolve_coordinates_empty_results(settings):
    session = FakeSession(lambda url, params: FakeResponse(payload={"results": []}))
    assert isinstance(StadiumResolver(settings, session=session).resolve_coordinates("Nowhere"), NotFound)


def test_resolve_coordinates_missing_key_makes_no_call(settings):
    no_key = Settings(**{**settings.model_dump(), "OPENCAGE_API_KEY": None})
    session = FakeSession(lambda url, params: FakeResponse(payload={"results": []}))

    assert isinstance(StadiumResolver(no_key, session=session).resolve_coordinates("Anfield"), NotFound)
    assert session.calls == []


def test_resolve_coordinates_malformed_payload(settings):
    session = FakeSession(lambda url, params: FakeResponse(payload={"results": [{"geometry": {}}]}))
    assert isinstance(StadiumResolver(settings, session=session).resolve_coordinates("Anfield"), NotFound)


def test_non_object_json_is_not_found(settings):
    session = FakeSession(lambda url, params: FakeResponse(payload=["unexpected"]))
    resolver = StadiumResolver(settings, session=session)

    assert isinstance(resolver.resolve_coordinates("Anfield"), NotFound)
    assert isinstance(resolver.resolve_stadium("Arsenal"), NotFound)


def test_nested_wrong_shapes_are_not_found(settings):
    def handler(url, params):
        if "geo.test" in url:
            return FakeResponse(payload={"results": "none"})
        return FakeResponse(payload={"query": ["not", "an", "object"]})

    resolver = StadiumResolver(settings, session=FakeSession(handler))

    assert isinstance(resolver.resolve_coordinates("Anfield"), NotFound)
    assert isinstance(resolver.resolve_stadium("Arsenal"), NotFound)


def test_extract_scans_every_infobox():
    html = """
    <table class="infobox"><tr><th>Founded</th><td>1886</td></tr></table>
    <table class="infobox vcard"><tr><th>Ground</th><td>Emirates Stadium</td></tr></table>
    """
    assert extract_stadium_from_html(html) == "Emirates Stadium"
