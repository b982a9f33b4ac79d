from enum import Enum


class UserRole(str, Enum):
    MANAGER = "MANAGER"
    TECHNICIAN = "TECHNICIAN"
    EMPLOYEE = "EMPLOYEE"


class EquipmentCategory(str, Enum):
    MACHINE = "MACHINE"
    VEHICLE = "VEHICLE"
    IT = "IT"


class RequestType(str, Enum):
    CORRECTIVE = "CORRECTIVE"
    PREVENTIVE = "PREVENTIVE"


class RequestStage(str, Enum):
    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"
    REPAIRED = "REPAIRED"  # terminal
    SCRAP = "SCRAP"  # terminal
