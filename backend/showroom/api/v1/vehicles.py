# backend/showroom/api/v1/vehicles.py
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from typing import List, Optional
import logging

from ...schemas.vehicle_schema import Vehicle, VehicleList, DescriptionRequest, DescriptionResponse
from ...models.vehicle_model import Vehicle as VehicleModel
from ...store.vehicle_store import VehicleFilters, VehicleStore
from ...core.exceptions import InvalidImageSetError, UploadRejectedError
from ...core.security import require_admin
from ...agents.description_agent.generator import VehicleTraits, describe_vehicle
from ...agents.inventory_agent.images import (
    orphaned_images,
    parse_keep_images,
    reconcile_images,
    store_uploads,
    validate_uploads,
)
from ...workflow.tasks import remove_uploads, schedule_upload_purge
from ..dependencies import get_vehicle_store

router = APIRouter()

MAX_PAGE_SIZE = 100


def _load_vehicle(store: VehicleStore, vehicle_id: int) -> VehicleModel:
    try:
        vehicle = store.get(vehicle_id)
    except Exception as e:
        logging.error(f"Failed to load vehicle {vehicle_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")

    if vehicle is None:
        raise HTTPException(status_code=404, detail="Not found")
    return vehicle


def _accept_uploads(images: Optional[List[UploadFile]]) -> List[str]:
    try:
        files = validate_uploads(images or [])
    except UploadRejectedError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return store_uploads(files)


# ===== DESCRIPTION ASSISTANT =====

@router.post("/generate-description", response_model=DescriptionResponse)
def generate_vehicle_description(request: DescriptionRequest):
    """Generate a sales description without saving anything"""
    if not request.brand or not request.model:
        raise HTTPException(status_code=400, detail="Brand and model are required")

    try:
        description = describe_vehicle(VehicleTraits(
            brand=request.brand,
            model=request.model,
            year=request.year,
            type=request.type,
            color=request.color,
            engine_size=request.engine_size,
        ))
    except Exception as e:
        logging.error(f"Description generation failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to generate description")

    return {"description": description}


# ===== VEHICLE CRUD =====

@router.post("", response_model=Vehicle, status_code=201, dependencies=[Depends(require_admin)])
def create_vehicle(
    vehicle_type: str = Form(..., alias="type"),
    brand: str = Form(...),
    model: str = Form(...),
    color: Optional[str] = Form(None),
    engine_size: Optional[str] = Form(None, alias="engineSize"),
    year: Optional[int] = Form(None),
    price: Optional[float] = Form(None),
    description: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    store: VehicleStore = Depends(get_vehicle_store),
):
    """Create a vehicle listing, generating a description when none is given"""
    image_refs = _accept_uploads(images)

    if not description:
        description = describe_vehicle(VehicleTraits(
            brand=brand, model=model, year=year, type=vehicle_type,
            color=color, engine_size=engine_size,
        ))

    vehicle = VehicleModel(
        type=vehicle_type,
        brand=brand,
        model=model,
        color=color,
        engine_size=engine_size,
        year=year,
        price=price if price is not None else 0,
        description=description,
        images=image_refs,
    )

    try:
        vehicle = store.add(vehicle)
    except Exception as e:
        logging.error(f"Failed to create vehicle: {e}", exc_info=True)
        remove_uploads(image_refs)
        raise HTTPException(status_code=500, detail="Server error")

    logging.info(f"Vehicle created: {vehicle.id} ({vehicle.brand} {vehicle.model})")
    return vehicle


@router.get("", response_model=VehicleList)
def list_vehicles(
    brand: Optional[str] = Query(None),
    model: Optional[str] = Query(None),
    vehicle_type: Optional[str] = Query(None, alias="type"),
    year: Optional[int] = Query(None),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    page: int = Query(1),
    limit: int = Query(20),
    store: VehicleStore = Depends(get_vehicle_store),
):
    """Public inventory listing, newest first, one page at a time"""
    # Out-of-range paging falls back to the first page / largest allowed page size
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)

    filters = VehicleFilters(
        brand=brand, model=model, type=vehicle_type, year=year,
        min_price=min_price, max_price=max_price,
    )
    try:
        items = store.list(filters, offset=(page - 1) * limit, limit=limit)
        total = store.count(filters)
    except Exception as e:
        logging.error(f"Failed to list vehicles: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")

    return {"data": items, "total": total, "page": page, "limit": limit}


@router.get("/{vehicle_id}", response_model=Vehicle)
def read_vehicle(vehicle_id: int, store: VehicleStore = Depends(get_vehicle_store)):
    """Get a specific vehicle by ID"""
    return _load_vehicle(store, vehicle_id)


@router.put("/{vehicle_id}", response_model=Vehicle, dependencies=[Depends(require_admin)])
def update_vehicle(
    vehicle_id: int,
    vehicle_type: Optional[str] = Form(None, alias="type"),
    brand: Optional[str] = Form(None),
    model: Optional[str] = Form(None),
    color: Optional[str] = Form(None),
    engine_size: Optional[str] = Form(None, alias="engineSize"),
    year: Optional[int] = Form(None),
    price: Optional[float] = Form(None),
    description: Optional[str] = Form(None),
    regenerate: Optional[str] = Form(None),
    keep_images: Optional[str] = Form(None, alias="keepImages"),
    images: Optional[List[UploadFile]] = File(None),
    store: VehicleStore = Depends(get_vehicle_store),
):
    """
    Update a vehicle listing.

    The image list is rebuilt from `keepImages` followed by the new uploads;
    omitting `keepImages` drops every previous image.
    """
    existing = _load_vehicle(store, vehicle_id)

    try:
        keep_list = parse_keep_images(keep_images)
    except InvalidImageSetError as e:
        raise HTTPException(status_code=400, detail=str(e))

    previous_images = list(existing.images or [])
    new_refs = _accept_uploads(images)
    existing.images = reconcile_images(keep_list, new_refs)

    # Fields left out of the form keep their stored values
    if vehicle_type is not None:
        existing.type = vehicle_type
    if brand is not None:
        existing.brand = brand
    if model is not None:
        existing.model = model
    if color is not None:
        existing.color = color
    if engine_size is not None:
        existing.engine_size = engine_size
    if year is not None:
        existing.year = year
    if price is not None:
        existing.price = price

    if regenerate == "true":
        existing.description = describe_vehicle(VehicleTraits(
            brand=existing.brand,
            model=existing.model,
            year=existing.year,
            type=existing.type,
            color=existing.color,
            engine_size=existing.engine_size,
        ))
    elif description:
        existing.description = description

    try:
        existing = store.save(existing)
    except Exception as e:
        logging.error(f"Failed to update vehicle {vehicle_id}: {e}", exc_info=True)
        remove_uploads(new_refs)
        raise HTTPException(status_code=500, detail="Server error")

    logging.info(f"Vehicle {vehicle_id} updated with {len(existing.images)} image(s)")
    schedule_upload_purge(orphaned_images(previous_images, existing.images))
    return existing


@router.delete("/{vehicle_id}", dependencies=[Depends(require_admin)])
def delete_vehicle(vehicle_id: int, store: VehicleStore = Depends(get_vehicle_store)):
    """Hard delete a vehicle listing"""
    vehicle = _load_vehicle(store, vehicle_id)
    images = list(vehicle.images or [])

    try:
        store.delete(vehicle)
    except Exception as e:
        logging.error(f"Failed to delete vehicle {vehicle_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")

    logging.info(f"Vehicle {vehicle_id} deleted")
    schedule_upload_purge(images)
    return {"message": "Deleted"}
