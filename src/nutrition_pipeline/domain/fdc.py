"""Pydantic models validating USDA FoodData Central responses."""

from pydantic import BaseModel, ConfigDict, Field


class FdcSearchFood(BaseModel):
    """Single food hit from an FDC search."""

    model_config = ConfigDict(populate_by_name=True)

    fdc_id: int = Field(alias="fdcId")
    description: str
    data_type: str = Field(alias="dataType")
    food_category: str | None = Field(default=None, alias="foodCategory")
    score: float | None = None


class FdcSearchResponse(BaseModel):
    """FDC search response page."""

    model_config = ConfigDict(populate_by_name=True)

    total_hits: int = Field(alias="totalHits")
    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    foods: list[FdcSearchFood]


class FdcNutrient(BaseModel):
    """Nutrient descriptor inside a food detail."""

    model_config = ConfigDict(populate_by_name=True)

    number: str
    name: str
    unit_name: str = Field(alias="unitName")


class FdcFoodNutrient(BaseModel):
    """Nutrient amount inside a food detail."""

    nutrient: FdcNutrient | None = None
    amount: float | None = None


class FdcFoodDetails(BaseModel):
    """FDC food detail with nutrient amounts."""

    model_config = ConfigDict(populate_by_name=True)

    fdc_id: int = Field(alias="fdcId")
    description: str
    data_type: str = Field(alias="dataType")
    food_nutrients: list[FdcFoodNutrient] = Field(alias="foodNutrients")
