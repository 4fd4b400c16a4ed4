import json

import pytest


def make_leg(
    origin="SFO",
    destination="LAX",
    carrier="UA",
    number="1234",
    airline="United",
    departure=(8, 30),
    arrival=(10,),
    date=(2026, 11, 3),
    duration=90,
    legroom=None,
    legroom_alt=None,
    aircraft="Airbus A320",
    operated_by=None,
):
    leg = [None] * 31
    leg[2] = operated_by
    leg[3] = origin
    leg[4] = f"{origin} International Airport"
    leg[5] = f"{destination} International Airport"
    leg[6] = destination
    leg[8] = list(departure)
    leg[10] = list(arrival)
    leg[11] = duration
    leg[14] = legroom_alt
    leg[17] = aircraft
    leg[20] = list(date)
    leg[21] = list(date)
    leg[22] = [carrier, number, None, airline]
    leg[30] = legroom
    return leg


def make_offer(price=100, is_best=False, legs=None, departure=(8, 30), arrival=(10,), duration=90, token="tok"):
    if legs is None:
        legs = [make_leg(departure=departure, arrival=arrival, duration=duration)]
    details = [None] * 10
    details[0] = "UA"
    details[1] = ["United"]
    details[2] = legs
    details[4] = [2026, 11, 3]
    details[5] = list(departure)
    details[7] = [2026, 11, 3]
    details[8] = list(arrival)
    details[9] = duration
    price_block = [[None, price], token] if price is not None else [[None], token]
    return [details, price_block, None, None, None, [1 if is_best else 0]]


def make_ds1(offers=None, grid=None):
    ds1 = [None, None, None, [offers if offers is not None else []], None, None]
    if grid is not None:
        ds1[5] = [None] * 10 + [[grid]]
    return ds1


def make_page(ds1) -> str:
    return (
        "<!doctype html><html><head><script nonce=\"x\">"
        f"AF_initDataCallback({{key: 'ds:1', hash: '2', data:{json.dumps(ds1)}, sideChannel: {{}}}});"
        "</script></head><body></body></html>"
    )


class FakeFetcher:
    """Stands in for RateLimitedFetcher, serving canned pages in order"""

    def __init__(self, *pages):
        self.pages = list(pages)
        self.urls = []

    async def fetch(self, url):
        self.urls.append(url)
        return self.pages.pop(0) if len(self.pages) > 1 else self.pages[0]

    async def fetch_checked(self, url):
        return await self.fetch(url)


@pytest.fixture
def fake_fetcher_factory():
    return FakeFetcher
