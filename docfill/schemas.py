"""Form and request schemas.

Pydantic v2 models for the values a user enters before filling templates,
and the mapping from those fields to placeholder keys.
"""

from pathlib import Path

from pydantic import BaseModel, Field

from docfill.strategies.template_engine.models import StyleOverride

INSTANCE_COUNT = 9


class TemplateKeys:
    """Placeholder keys understood by the bundled templates."""

    OBJECT_DESC = "object_desc"
    SUB_CONTRACTOR = "sub_contractor"
    SUB_CONTRACTOR_NAME = "sub_contractor_name"
    CONTRACTOR = "contractor"
    CONTRACTOR_NAME = "contractor_name"
    DESIGN_ORG = "design_org"
    DESIGN_ORG_NAME = "design_org_name"
    CUSTOMER = "customer"
    CUSTOMER_NAME = "customer_name"
    CERTIFICATION = "certification"
    DESIGN_DOC = "design_doc"
    SUB_CONTRACTOR_CO = "sub_contractor_co"
    CONTRACTOR_CO = "contractor_co"
    DESIGN_CO = "design_co"
    CUSTOMER_CO = "customer_co"

    @staticmethod
    def object_name_key(index: int) -> str:
        """Key for the object name of instance ``index`` (0-based)."""
        return f"object_name_{index + 1}"

    @staticmethod
    def sr_num_key(index: int) -> str:
        """Key for the project number of instance ``index`` (0-based)."""
        return f"sr_num_{index + 1}"


# =============================================================================
# Form Schemas
# =============================================================================


class InstanceData(BaseModel):
    """One of the numbered objects listed in a document set."""

    object_name: str = Field(default="", description="Object name")
    sr_num: str = Field(default="", description="Project number")

    @property
    def is_complete(self) -> bool:
        return bool(self.object_name.strip()) and bool(self.sr_num.strip())


class FormData(BaseModel):
    """All values collected from the form."""

    object_desc: str = ""
    sub_contractor: str = ""
    sub_contractor_name: str = ""
    contractor: str = ""
    contractor_name: str = ""
    design_org: str = ""
    design_org_name: str = ""
    customer: str = ""
    customer_name: str = ""
    certification: str = ""
    design_doc: str = ""
    sub_contractor_co: str = ""
    contractor_co: str = ""
    design_co: str = ""
    customer_co: str = ""
    instances: list[InstanceData] = Field(
        default_factory=lambda: [InstanceData() for _ in range(INSTANCE_COUNT)],
        description="Numbered objects; keys object_name_N and sr_num_N",
    )

    def missing_instances(self) -> list[int]:
        """Return 1-based numbers of instances lacking a name or project number."""
        return [index + 1 for index, instance in enumerate(self.instances) if not instance.is_complete]

    def to_data_map(self) -> dict[str, str]:
        """Build the placeholder data map."""
        data = {
            TemplateKeys.OBJECT_DESC: self.object_desc,
            TemplateKeys.SUB_CONTRACTOR: self.sub_contractor,
            TemplateKeys.SUB_CONTRACTOR_NAME: self.sub_contractor_name,
            TemplateKeys.CONTRACTOR: self.contractor,
            TemplateKeys.CONTRACTOR_NAME: self.contractor_name,
            TemplateKeys.CUSTOMER: self.customer,
            TemplateKeys.CUSTOMER_NAME: self.customer_name,
            TemplateKeys.DESIGN_ORG: self.design_org,
            TemplateKeys.DESIGN_ORG_NAME: self.design_org_name,
            TemplateKeys.CERTIFICATION: self.certification,
            TemplateKeys.DESIGN_DOC: self.design_doc,
            TemplateKeys.SUB_CONTRACTOR_CO: self.sub_contractor_co,
            TemplateKeys.CONTRACTOR_CO: self.contractor_co,
            TemplateKeys.DESIGN_CO: self.design_co,
            TemplateKeys.CUSTOMER_CO: self.customer_co,
        }
        for index, instance in enumerate(self.instances):
            data[TemplateKeys.object_name_key(index)] = instance.object_name
            data[TemplateKeys.sr_num_key(index)] = instance.sr_num
        return data


# =============================================================================
# Processing Schemas
# =============================================================================


class ProcessingRequest(BaseModel):
    """Everything needed to fill one template folder."""

    template_dir: str = Field(description="Folder holding the templates")
    output_dir: str = Field(description="Folder receiving the filled documents")
    output_file_name: str = Field(
        default="",
        description="Name for the first template found directly in the template folder",
    )
    form: FormData = Field(default_factory=FormData)
    style: StyleOverride = Field(default_factory=StyleOverride)

    @property
    def template_path(self) -> Path:
        return Path(self.template_dir.strip())

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir.strip())
