import uuid
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.core.tenant import TenantContext
from app.crud.category import category as crud_category
from app.models.category import Category as CategoryModel
from app.schemas.category import CategoryCreate, Category
from app.utils.permission import PermissionHelper as permission_helper


class CategoryService:

    def create_category(self, db: Session, category_in: CategoryCreate, current_user_context: TenantContext) -> Category:
        permission_helper.require_content_author(current_user_context, "Students cannot create categories.")
        new_category = crud_category.add(db, context=current_user_context, obj_in=category_in)
        crud_category.save_changes(db)
        db.refresh(new_category)
        return Category.model_validate(new_category)

    def get_category(self, db: Session, category_id: uuid.UUID, current_user_context: TenantContext) -> Category:
        category = crud_category.get(db, category_id, context=current_user_context)
        if not category:
            raise NotFoundError("Category not found.")
        return Category.model_validate(category)

    def get_categories(self, db: Session, current_user_context: TenantContext) -> List[Category]:
        categories = crud_category.get_all(db, context=current_user_context, order_by=CategoryModel.name)
        return [Category.model_validate(c) for c in categories]

    def delete_category(self, db: Session, category_id: uuid.UUID, current_user_context: TenantContext) -> Category:
        permission_helper.require_content_author(current_user_context, "Students cannot delete categories.")
        category = crud_category.get(db, category_id, context=current_user_context)
        if not category:
            raise NotFoundError("Category not found.")
        crud_category.remove(db, context=current_user_context, db_obj=category)
        crud_category.save_changes(db)
        return Category.model_validate(category)


category_service = CategoryService()
