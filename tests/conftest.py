"""Shared fixtures: fakes, sample entries and a sample playlist."""

import pytest

from channelbox.models import ChannelEntry

from fakes import FakeFactory, FakeTarget, RecordingRenderer


@pytest.fixture
def target():
    return FakeTarget()


@pytest.fixture
def factory():
    return FakeFactory()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def direct_entry():
    return ChannelEntry(name="Sky News", stream_url="http://example.com/live.ts", category="News")


@pytest.fixture
def hls_entry():
    return ChannelEntry(name="BBC One", stream_url="http://example.com/bbc/index.m3u8", category="General")


SAMPLE_PLAYLIST = """#EXTM3U
#EXTINF:-1 tvg-id="SkyNews.uk" tvg-logo="http://logo/sky.png" group-title="News",Sky News (720p)
http://example.com/sky.m3u8
#EXTINF:-1 tvg-id="BBCNews.uk" group-title="News",BBC News
http://example.com/bbcnews.m3u8
#EXTINF:-1 tvg-id="Cartoon.us" group-title="Kids",Cartoon Channel (1080p)
http://example.com/cartoon.ts
#EXTINF:-1 group-title="Undefined",Mystery TV
http://example.com/mystery.m3u8
#EXTINF:-1 tvg-id="NoGroup.fr",Plain Channel
http://example.com/plain.mp4
"""


@pytest.fixture
def sample_playlist():
    return SAMPLE_PLAYLIST
