from django.db import models


class Client(models.Model):
    """Customer that can buy fuel on credit (person or company)."""

    client_id = models.BigAutoField(primary_key=True)

    first_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)
    company_name = models.CharField(max_length=200, blank=True)

    # RUC / DNI
    document_number = models.CharField(max_length=20, blank=True, db_index=True)

    phone = models.CharField(max_length=30, blank=True)
    email = models.EmailField(blank=True)
    address = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'clients'
        ordering = ['last_name', 'first_name', 'company_name']

    def __str__(self):
        return self.display_name

    @property
    def display_name(self):
        """Full name for people, company name otherwise."""
        full_name = f"{self.first_name} {self.last_name}".strip()
        if full_name:
            return full_name
        if self.company_name:
            return self.company_name
        return 'No client'
