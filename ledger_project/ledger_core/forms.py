from django import forms

from .services.accounts import FsFilter


# Parameters for starting a trial balance / general ledger job
class ReportStartForm(forms.Form):
    company_id = forms.IntegerField()
    start_account = forms.CharField(max_length=75)
    end_account = forms.CharField(max_length=75)
    start_date = forms.DateField()
    end_date = forms.DateField()
    fs = forms.ChoiceField(choices=FsFilter.choices, required=False)

    def clean_fs(self):
        # blank means "ALL"
        return (self.cleaned_data.get("fs") or FsFilter.ALL).upper()

    def clean(self):
        cleaned = super().clean()
        start_account = cleaned.get("start_account")
        end_account = cleaned.get("end_account")
        if start_account and end_account and start_account > end_account:
            raise forms.ValidationError("Start account must not be after end account.")
        start_date = cleaned.get("start_date")
        end_date = cleaned.get("end_date")
        if start_date and end_date and start_date > end_date:
            raise forms.ValidationError("Start date must not be after end date.")
        return cleaned


# Query parameters for the account dropdown
class AccountListForm(forms.Form):
    company_id = forms.IntegerField(required=False)
    fs = forms.ChoiceField(choices=FsFilter.choices, required=False)
