from pydantic import BaseModel, ConfigDict


class BaseCadenceModel(BaseModel):
    """Base Pydantic model for the Cadence project.

    Provides defaults specific to our codebase and makes global changes easier.
    Instances are immutable; edits produce new instances via ``model_copy``.
    """

    model_config = ConfigDict(
        frozen=True,
        revalidate_instances="always",
        validate_assignment=True,
        populate_by_name=True,
    )
