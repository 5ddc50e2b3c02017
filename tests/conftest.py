"""
Configure pytest environment.

This file is automatically loaded by pytest and used to set up the test environment.
"""
import sys
from pathlib import Path

import pytest

# Add the project root directory to the Python path
# This allows tests to import the checklist_engine package without installing it
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from checklist_engine.formats.context import CodecContext
from checklist_engine.schemas.common.enums import (
    CompletionAction,
    FrequencyBand,
    GroupCategory,
    ItemKind,
    ScratchpadTarget,
)
from checklist_engine.schemas.documents.checklist import (
    Checklist,
    ChecklistDocument,
    ChecklistGroup,
    ChecklistItem,
    DocumentMetadata,
)


@pytest.fixture
def context():
    """Codec context with default settings, independent of any YAML file."""
    return CodecContext()


@pytest.fixture
def binary_document():
    """Document using only features the binary format can carry."""
    return ChecklistDocument(
        title="N12345 Checklists",
        metadata=DocumentMetadata(
            aircraft_registration="N12345",
            make_model="Cessna 172S",
            manufacturer="Cessna",
            copyright="Copyright Example Flying Club",
        ),
        groups=[
            ChecklistGroup(
                category=GroupCategory.NORMAL,
                title="Preflight",
                checklists=[
                    Checklist(
                        title="Cabin",
                        items=[
                            ChecklistItem(kind=ItemKind.PLAIN_TEXT, text="Documents", response="ON BOARD"),
                            ChecklistItem(kind=ItemKind.PLAIN_TEXT, text="Parking brake", response="SET"),
                            ChecklistItem(kind=ItemKind.TITLE, text="Avionics"),
                            ChecklistItem(kind=ItemKind.PLAIN_TEXT, text="Master switch", response="ON", indent=1),
                            ChecklistItem(kind=ItemKind.NOTE, text="Check fuel quantity on both gauges", indent=2),
                        ],
                    ),
                    Checklist(
                        title="Exterior",
                        items=[
                            ChecklistItem(kind=ItemKind.WARNING, text="Propeller area clear"),
                            ChecklistItem(kind=ItemKind.CAUTION, text="Fuel sumps drained"),
                            ChecklistItem(kind=ItemKind.PLAIN_TEXT, text="Walk around", centered=True),
                        ],
                    ),
                ],
            ),
            ChecklistGroup(
                category=GroupCategory.NORMAL,
                title="Landing",
                checklists=[
                    Checklist(
                        title="Before Landing",
                        items=[ChecklistItem(kind=ItemKind.PLAIN_TEXT, text="Mixture", response="RICH")],
                    ),
                ],
            ),
        ],
    )


@pytest.fixture
def container_document():
    """Document whose group titles all have exact container keys."""
    return ChecklistDocument(
        title="Club Binder",
        groups=[
            ChecklistGroup(
                category=GroupCategory.NORMAL,
                title="Preflight",
                checklists=[
                    Checklist(
                        title="Before Start",
                        note="Complete before every flight",
                        items=[
                            ChecklistItem(kind=ItemKind.PLAIN_TEXT, text="Seats", response="ADJUSTED"),
                            ChecklistItem(kind=ItemKind.TITLE, text="Radios"),
                            ChecklistItem(kind=ItemKind.NOTE, text="Use headset volume knob"),
                            ChecklistItem(kind=ItemKind.NOTE, text="WARNING: this is literal text"),
                            ChecklistItem(kind=ItemKind.WARNING, text="Do not start with the door open"),
                            ChecklistItem(kind=ItemKind.CAUTION, text="Starter limit 10 seconds", indent=1),
                            ChecklistItem(
                                kind=ItemKind.OPEN_SCRATCHPAD,
                                text="Copy ATIS",
                                scratchpad=ScratchpadTarget.ATIS,
                            ),
                            ChecklistItem(
                                kind=ItemKind.FREQUENCY_PROMPT,
                                text="Ground",
                                band=FrequencyBand.GROUND_CTAF,
                            ),
                        ],
                    ),
                    Checklist(
                        title="Runup",
                        items=[
                            ChecklistItem(kind=ItemKind.LOCAL_ALTIMETER, text="Altimeter", centered=True),
                            ChecklistItem(
                                kind=ItemKind.PLAIN_TEXT,
                                text="Flight plan",
                                response="LOADED",
                                completion_action=CompletionAction.OPEN_FLIGHT_PLAN,
                            ),
                        ],
                    ),
                ],
            ),
            ChecklistGroup(
                category=GroupCategory.NORMAL,
                title="Landing",
                checklists=[
                    Checklist(
                        title="Approach",
                        items=[ChecklistItem(kind=ItemKind.OPEN_NEAREST, text="Nearest airports")],
                    ),
                ],
            ),
            ChecklistGroup(
                category=GroupCategory.ABNORMAL,
                title="Abnormal",
                checklists=[
                    Checklist(
                        title="Alternator Failure",
                        items=[ChecklistItem(kind=ItemKind.PLAIN_TEXT, text="Load", response="REDUCE")],
                    ),
                ],
            ),
            ChecklistGroup(
                category=GroupCategory.EMERGENCY,
                title="Emergency",
                checklists=[
                    Checklist(
                        title="Engine Fire",
                        items=[ChecklistItem(kind=ItemKind.PLAIN_TEXT, text="Mixture", response="IDLE CUTOFF")],
                    ),
                ],
            ),
        ],
    )


@pytest.fixture
def full_document(container_document):
    """Document exercising every canonical feature, including metadata."""
    document = container_document.model_copy(deep=True)
    document.metadata = DocumentMetadata(
        aircraft_registration="N54321",
        make_model="Piper PA-28",
        manufacturer="Piper",
        copyright="(c) 2024",
    )
    document.groups.append(ChecklistGroup(category=GroupCategory.NORMAL, title="Empty"))
    return document
