from .attendance import Attendance
from .employee import Employee
from .leave import Leave
from .payroll import Payroll
from .user import User

__all__ = ["User", "Employee", "Payroll", "Attendance", "Leave"]
