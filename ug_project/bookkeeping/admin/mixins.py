class ReadOnlyAdminMixin:
    """
    Journal-side records are written by the services only;
    the admin can look but not touch.
    """

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
