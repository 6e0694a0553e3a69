#!/usr/bin/env python3
"""Interactive terminal front end for the diary API."""

import os
import sys
from typing import Optional

from diary.app.config import get_settings
from diary.client.api_client import DEFAULT_BASE_URL, DiaryApiClient
from diary.client.page import DiaryPage

FIELD_PROMPTS = [
    ("date", "Date (YYYY-MM-DD)"),
    ("mood", "Mood (1-10)"),
    ("learned", "What did you learn today?"),
    ("improvements", "What could be improved?"),
    ("lookingForward", "What are you looking forward to?"),
    ("news", "Today's news"),
]

def print_header(title: str):
    print()
    print("=" * 50)
    print(f" {title} ".center(50, "="))
    print("=" * 50)
    print()

def get_input(prompt: str, default: Optional[str] = None) -> str:
    if default:
        result = input(f"{prompt} [{default}]: ").strip()
        if not result:
            return default
        return result
    return input(f"{prompt}: ").strip()

def confirm(message: str) -> bool:
    return get_input(f"{message} (y/n)", "n").lower().startswith("y")

def show_banners(page: DiaryPage):
    if page.error:
        print(f"\n! {page.error}")
        page.dismiss_error()
    if page.success:
        print(f"\n{page.success}")
        page.dismiss_success()

def list_entries(page: DiaryPage):
    print_header("Diary Entries")
    print(page.entry_list().render_text())

def show_chart(page: DiaryPage):
    print_header("Mood Trend")
    print(page.chart().render_text())

def fill_form(page: DiaryPage):
    form = page.form()
    print_header("Edit Entry" if form.is_editing else "New Entry")

    for name, prompt in FIELD_PROMPTS:
        current = form.draft.get(name)
        value = get_input(prompt, str(current) if current not in (None, "") else None)
        if name == "mood":
            try:
                value = int(value)
            except ValueError:
                pass
        form.set_field(name, value)

    for index in range(form.slots):
        items = form.draft["gratitude"]
        current = items[index] if index < len(items) else ""
        form.set_gratitude(index, get_input(f"Grateful for #{index + 1}", current or None))

    # A rejected save reports through the page error banner instead
    if not form.submit() and form.error:
        print(f"\n! {form.error}")
    page.cancel_edit()

def pick_entry(page: DiaryPage) -> Optional[str]:
    if not page.entries:
        print("\nNo entries to choose from.")
        return None
    list_entries(page)
    choice = get_input("\nEntry number")
    try:
        return page.entries[int(choice) - 1]["id"]
    except (ValueError, IndexError, KeyError):
        print(f"\nNo entry numbered {choice}")
        return None

def edit_entry(page: DiaryPage):
    entry_id = pick_entry(page)
    if entry_id and page.entry_list().edit(entry_id):
        fill_form(page)

def delete_entry(page: DiaryPage):
    entry_id = pick_entry(page)
    if entry_id:
        page.entry_list().delete(entry_id)

def main_menu(page: DiaryPage):
    page.load()
    while True:
        show_banners(page)
        print_header("Daily Diary")

        print("1. List Entries")
        print("2. New Entry")
        print("3. Edit Entry")
        print("4. Delete Entry")
        print("5. Mood Chart")
        print("6. Refresh")
        print("0. Exit")

        choice = get_input("\nEnter your choice")

        if choice == "0":
            print("\nExiting...")
            return
        elif choice == "1":
            list_entries(page)
        elif choice == "2":
            page.cancel_edit()
            fill_form(page)
        elif choice == "3":
            edit_entry(page)
        elif choice == "4":
            delete_entry(page)
        elif choice == "5":
            show_chart(page)
        elif choice == "6":
            page.load()

def main():
    base_url = os.getenv("DIARY_API_URL", DEFAULT_BASE_URL)
    page = DiaryPage(
        DiaryApiClient(base_url),
        confirm=confirm,
        max_gratitude=get_settings().gratitude_limit,
    )
    main_menu(page)
    return 0

if __name__ == "__main__":
    sys.exit(main())
