from .maintenance_enums import UserRole, EquipmentCategory, RequestType, RequestStage

__all__ = ["UserRole", "EquipmentCategory", "RequestType", "RequestStage"]
