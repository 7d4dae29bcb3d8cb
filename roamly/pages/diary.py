"""Travel Diary page"""
from datetime import date

from ..schemas.request import DiaryEntryForm
from ..validators.input_validator import ValidationError, validate_diary_entry
from .base import ResourceListPage


class DiaryPage(ResourceListPage):
    path = "/diary"
    load_error = "Failed to load diary entries"
    create_success = "Entry created!"
    create_error = "Failed to create entry"
    delete_success = "Entry deleted"
    delete_error = "Failed to delete entry"

    async def create(self, form: DiaryEntryForm) -> bool:
        """
        Validate and insert a diary entry, then re-list

        Args:
            form: Title, content, optional location and date (defaults to today)

        Returns:
            True if the entry was stored
        """
        try:
            validate_diary_entry(form)
        except ValidationError as e:
            self.notify_error(e.message)
            return False

        return await self._create({
            "title": form.title,
            "content": form.content,
            "location": form.location,
            "entry_date": (form.entry_date or date.today()).isoformat()
        })
