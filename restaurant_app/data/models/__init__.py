#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from restaurant_app.data.models.product import ProductModel
from restaurant_app.data.models.order import OrderModel
from restaurant_app.data.models.order_item import OrderItemModel
from restaurant_app.data.models.user_role import UserRoleModel

__all__ = ["ProductModel", "OrderModel", "OrderItemModel", "UserRoleModel"]
