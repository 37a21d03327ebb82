from django import forms

from .exceptions import CatalogError


class NamedEntityAdminForm(forms.ModelForm):
    """
    Admin add/change form for Grade, Subject and Medium. Runs the same name
    checks as the API: the slug must be a usable folder name and no other
    row may have the same name or slug.
    """
    store = None  # set per admin in NamedEntityAdmin.get_form

    def clean(self):
        cleaned_data = super().clean()
        if 'name' not in cleaned_data:
            return cleaned_data
        try:
            name, normalized_name = self.store.check_name(cleaned_data['name'], exclude_id=self.instance.pk)
        except CatalogError as e:
            raise forms.ValidationError(e.message)
        cleaned_data['name'] = name
        cleaned_data['normalized_name'] = normalized_name
        return cleaned_data
