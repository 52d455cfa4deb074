from __future__ import annotations

from kivy.app import App
from kivy.properties import BooleanProperty, StringProperty
from kivy.uix.screenmanager import Screen

from kivymd.uix.button import MDRaisedButton

from channelbox.catalog import ALL_CATEGORIES
from channelbox.models import ChannelEntry, SessionState
from channelbox.player import NO_MATCHES_MESSAGE, entry_row


class ChannelsScreen(Screen):
    message = StringProperty("")

    def on_search(self, text: str) -> None:
        app = App.get_running_app()
        if app.player is None:
            return
        app.player.search(text or "")
        self._highlight(ALL_CATEGORIES)

    def on_category(self, label: str) -> None:
        app = App.get_running_app()
        if app.player is None:
            return
        self.ids.search_input.text = ""
        app.player.select_category(label)
        self._highlight(label)

    def set_categories(self, categories: list[str]) -> None:
        bar = self.ids.category_bar
        bar.clear_widgets()
        bar.add_widget(CategoryButton(text="All Channels", category=ALL_CATEGORIES))
        for c in categories:
            bar.add_widget(CategoryButton(text=c, category=c))
        self._highlight(ALL_CATEGORIES)

    def set_entries(self, entries: list[ChannelEntry]) -> None:
        app = App.get_running_app()
        self.ids.channel_list.data = [
            dict(entry_row(e), on_release=lambda entry=e: app.player.play(entry))
            for e in entries
        ]
        self.message = "" if entries else NO_MATCHES_MESSAGE
        total = len(app.player.catalog.entries) if app.player else len(entries)
        self.ids.summary_label.text = f"Channels: {len(entries)} / {total}"

    def show_message(self, text: str) -> None:
        self.ids.channel_list.data = []
        self.message = text

    def _highlight(self, category: str) -> None:
        for btn in self.ids.category_bar.children:
            btn.active = btn.category == category


class PlayerScreen(Screen):
    channel_name = StringProperty("")
    error_text = StringProperty("")

    def on_close(self) -> None:
        app = App.get_running_app()
        if app.player is not None:
            app.player.close()


class CategoryButton(MDRaisedButton):
    category = StringProperty("")
    active = BooleanProperty(False)

    def on_active(self, _inst, value: bool) -> None:
        self.opacity = 1.0 if value else 0.6

    def on_release(self, *args) -> None:
        App.get_running_app().root.get_screen("channels").on_category(self.category)


class KivyRenderer:
    def __init__(self, root):
        self.root = root

    @property
    def channels(self) -> ChannelsScreen:
        return self.root.get_screen("channels")

    @property
    def player_screen(self) -> PlayerScreen:
        return self.root.get_screen("player")

    def show_categories(self, categories: list[str]) -> None:
        self.channels.set_categories(categories)

    def show_entries(self, entries: list[ChannelEntry]) -> None:
        self.channels.set_entries(entries)

    def show_load_error(self, message: str) -> None:
        self.channels.show_message(message)

    def show_session(self, state: SessionState, entry: ChannelEntry | None, message: str) -> None:
        if state is SessionState.IDLE:
            self.player_screen.error_text = ""
            self.root.current = "channels"
            return

        scr = self.player_screen
        scr.channel_name = entry.name if entry else ""
        scr.error_text = message if state is SessionState.ERROR else ""
        if self.root.current != "player":
            self.root.current = "player"
