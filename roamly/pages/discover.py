"""Discover page - saved destinations"""
from ..schemas.request import DestinationForm
from ..validators.input_validator import ValidationError, validate_destination
from .base import ResourceListPage


class DiscoverPage(ResourceListPage):
    path = "/discover"
    load_error = "Failed to load destinations"
    create_success = "Destination saved!"
    create_error = "Failed to save destination"
    delete_success = "Destination removed"
    delete_error = "Failed to remove destination"

    async def create(self, form: DestinationForm) -> bool:
        try:
            validate_destination(form)
        except ValidationError as e:
            self.notify_error(e.message)
            return False

        return await self._create({
            "destination_name": form.name,
            "location": form.location,
            "description": form.description,
            "category": form.category,
            "notes": ""
        })
