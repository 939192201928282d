from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.auth.deps import get_current_user
from storefront.auth.schemas import AuthUser
from storefront.core.pagination import PageParams, page_params, total_pages
from storefront.core.responses import ApiResponse, ok
from storefront.core.schemas import CountWithDates
from storefront.db.session import get_db
from storefront.leads import service
from storefront.leads.schemas import LeadCreate, LeadOut, LeadPage, LeadUpdate, RecentLead

router = APIRouter()


@router.get("/search", response_model=ApiResponse[list[LeadOut]])
def search_leads(
    q: str | None = Query(default=None, max_length=200),
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    leads = service.search_leads(db, q)
    return ok("Leads retrieved successfully", [LeadOut.model_validate(lead) for lead in leads])


@router.get("/recent", response_model=ApiResponse[list[RecentLead]])
def recent_leads(
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    return ok("Recent leads retrieved successfully", service.recent_leads(db))


@router.get("/leads-length", response_model=ApiResponse[int])
def leads_length(
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    return ok("Total leads retrieved successfully", service.count_leads(db))


@router.get("/length-date", response_model=ApiResponse[CountWithDates])
def leads_length_and_date(
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    return ok(
        "Total leads and creation dates retrieved successfully",
        CountWithDates(
            count=service.count_leads(db),
            creation_dates=service.lead_creation_dates(db),
        ),
    )


@router.post("", status_code=201, response_model=ApiResponse[LeadOut])
def create_lead(
    payload: LeadCreate,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    lead = service.create_lead(
        db,
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        message=payload.message,
    )
    return ok("Lead created successfully", LeadOut.model_validate(lead))


@router.get("", response_model=ApiResponse[LeadPage])
def list_leads(
    paging: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    leads, total = service.list_leads(db, offset=paging.offset, limit=paging.limit)
    return ok(
        "Leads retrieved successfully",
        LeadPage(
            leads=[LeadOut.model_validate(lead) for lead in leads],
            total=total,
            total_pages=total_pages(total, paging.limit),
            current_page=paging.page,
        ),
    )


@router.get("/{slug}", response_model=ApiResponse[LeadOut])
def get_lead(
    slug: str,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    return ok("Lead retrieved successfully", LeadOut.model_validate(service.get_lead_or_404(db, slug)))


@router.put("/{slug}", response_model=ApiResponse[LeadOut])
def update_lead(
    slug: str,
    payload: LeadUpdate,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    lead = service.update_lead(
        db,
        slug,
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        message=payload.message,
        lead_type=payload.type,
    )
    return ok("Lead updated successfully", LeadOut.model_validate(lead))


@router.delete("/{slug}", response_model=ApiResponse[dict])
def delete_lead(
    slug: str,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
):
    service.delete_lead(db, slug)
    return ok("Lead deleted successfully", {})
