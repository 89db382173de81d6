# Import every model module so Base.metadata is complete for create_all().
from medstore.models.user import User  # noqa: F401
from medstore.models.inventory import (  # noqa: F401
    Customer,
    DrugSchedule,
    Product,
    ProductBatch,
    Supplier,
)
from medstore.models.ledger import (  # noqa: F401
    PaymentStatus,
    POStatus,
    Purchase,
    PurchaseItem,
    PurchaseOrder,
    PurchaseOrderItem,
    Transaction,
    TransactionItem,
    TransactionType,
)
from medstore.models.returns import (  # noqa: F401
    ReturnItem,
    ReturnNote,
    ReturnStatus,
    ReturnType,
    SettlementType,
)
