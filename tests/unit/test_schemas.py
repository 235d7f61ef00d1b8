"""
Unit tests for request payload validation
"""
import pytest
from pydantic import ValidationError
from quizbuilder.schemas import AlternativeCreate, AlternativeUpdate, ExerciseUpdate, ModuleUpdate


class TestUpdatePayloads:

    @pytest.mark.parametrize("model, field", [
        (AlternativeUpdate, "content"),
        (ExerciseUpdate, "question"),
        (ExerciseUpdate, "weight"),
        (ExerciseUpdate, "image_layout"),
        (ExerciseUpdate, "image_display_size"),
        (ModuleUpdate, "title"),
    ])
    def test_required_columns_reject_null(self, model, field):
        with pytest.raises(ValidationError):
            model(**{field: None})

    def test_omitted_fields_stay_out_of_the_patch(self):
        assert AlternativeUpdate(is_correct=True).model_dump(exclude_unset=True) == {"is_correct": True}
        assert ModuleUpdate(description=None).model_dump(exclude_unset=True) == {"description": None}

    def test_optional_columns_accept_null(self):
        patch = ExerciseUpdate(video_url=None, image_url=None).model_dump(exclude_unset=True)
        assert patch == {"video_url": None, "image_url": None}

    def test_image_lists_are_capped(self):
        urls = [f"https://cdn.example.com/{i}.png" for i in range(6)]

        assert AlternativeCreate(content="CO2", image_urls=urls).image_urls == urls[:4]
        assert ExerciseUpdate(image_urls=urls).image_urls == urls[:4]
        assert AlternativeUpdate(image_urls=[]).image_urls is None
