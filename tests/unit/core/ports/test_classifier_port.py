"""Tests for ClassifierPort interface"""
import pytest

from notecoder.core.models.condition import ConditionType
from notecoder.core.ports.classifier import ClassifierPort


class TestClassifierPort:
    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            ClassifierPort()

    def test_subclass_must_implement_classify(self):
        class Incomplete(ClassifierPort):
            pass

        with pytest.raises(TypeError):
            Incomplete()

    @pytest.mark.asyncio
    async def test_concrete_implementation(self):
        class Echo(ClassifierPort):
            async def classify(self, note_text, condition):
                return {"conditionType": condition.value}

        payload = await Echo().classify("note", ConditionType.CKD)
        assert payload == {"conditionType": "ckd"}
