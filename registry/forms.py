import logging
from decimal import Decimal

from django import forms
from django.contrib.auth.models import User

from .location_utils import validate_malawi_district, validate_land_use, quantize_coordinate
from .maps import PROVIDERS
from .models import LandRegistration, ROLE_CHOICES, ROLE_USER

# Get logger for this module
logger = logging.getLogger(__name__)
validation_logger = logging.getLogger('registry.validation')

PASSWORD_MIN_LENGTH = 6


# ============ AUTH FORMS ============
class SignUpForm(forms.Form):
    full_name = forms.CharField(
        max_length=200,
        required=True,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'John Banda'})
    )
    email = forms.EmailField(
        required=True,
        widget=forms.EmailInput(attrs={'class': 'form-control', 'placeholder': 'john@example.com'})
    )
    password = forms.CharField(
        min_length=PASSWORD_MIN_LENGTH,
        required=True,
        widget=forms.PasswordInput(attrs={'class': 'form-control'})
    )
    role = forms.ChoiceField(
        choices=ROLE_CHOICES,
        initial=ROLE_USER,
        widget=forms.RadioSelect
    )

    def clean_email(self):
        email = self.cleaned_data['email'].strip().lower()
        if User.objects.filter(username__iexact=email).exists() or User.objects.filter(email__iexact=email).exists():
            raise forms.ValidationError("An account with this email already exists.")
        return email


class SignInForm(forms.Form):
    email = forms.EmailField(
        required=True,
        widget=forms.EmailInput(attrs={'class': 'form-control', 'placeholder': 'john@example.com'})
    )
    password = forms.CharField(
        required=True,
        widget=forms.PasswordInput(attrs={'class': 'form-control'})
    )

    def clean_email(self):
        return self.cleaned_data['email'].strip().lower()


# ============ LAND REGISTRATION FORM ============
class LandRegistrationForm(forms.ModelForm):
    """Property details for a new registration. Boundaries and document are optional."""

    # Accept any precision from a map click; stored values are rounded to 6 places
    latitude = forms.DecimalField(
        required=True,
        widget=forms.NumberInput(attrs={'class': 'form-control', 'step': '0.000001', 'placeholder': '-13.962634'})
    )
    longitude = forms.DecimalField(
        required=True,
        widget=forms.NumberInput(attrs={'class': 'form-control', 'step': '0.000001', 'placeholder': '33.774119'})
    )

    class Meta:
        model = LandRegistration
        fields = [
            'title_deed_number',
            'land_size',
            'land_use',
            'district',
            'location_name',
            'latitude',
            'longitude',
            'boundaries',
            'document',
        ]
        widgets = {
            'title_deed_number': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'TD-12345'}),
            'land_size': forms.NumberInput(attrs={'class': 'form-control', 'step': '0.01', 'placeholder': '2.5'}),
            'land_use': forms.Select(attrs={'class': 'form-select'}),
            'district': forms.Select(attrs={'class': 'form-select'}),
            'location_name': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g., Area 47, Section 12'}),
            'boundaries': forms.Textarea(attrs={
                'class': 'form-control',
                'rows': 3,
                'placeholder': 'Describe the boundaries of the property...'
            }),
            'document': forms.ClearableFileInput(attrs={'class': 'form-control'}),
        }
        labels = {
            'land_size': 'Land Size (hectares)',
            'boundaries': 'Boundaries Description',
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['boundaries'].required = False
        self.fields['document'].required = False

    def clean_land_size(self):
        land_size = self.cleaned_data.get('land_size')
        if land_size is not None and land_size <= Decimal('0'):
            raise forms.ValidationError("Land size must be greater than zero.")
        return land_size

    def clean_land_use(self):
        land_use = self.cleaned_data.get('land_use')
        is_valid, message = validate_land_use(land_use)
        if not is_valid:
            raise forms.ValidationError(message)
        return land_use

    def clean_district(self):
        district = self.cleaned_data.get('district')
        is_valid, message = validate_malawi_district(district)
        if not is_valid:
            raise forms.ValidationError(message)
        return district

    def clean_latitude(self):
        # Range check first; quantize cannot represent very large values
        latitude = self.cleaned_data.get('latitude')
        if latitude is not None and not -90 <= latitude <= 90:
            raise forms.ValidationError("Latitude must be between -90 and 90.")
        return quantize_coordinate(latitude)

    def clean_longitude(self):
        longitude = self.cleaned_data.get('longitude')
        if longitude is not None and not -180 <= longitude <= 180:
            raise forms.ValidationError("Longitude must be between -180 and 180.")
        return quantize_coordinate(longitude)

    def clean(self):
        cleaned_data = super().clean()
        if self.errors:
            validation_logger.info(f"Registration form rejected: {self.errors.as_json()}")
        return cleaned_data

    @property
    def property_data(self):
        """Cleaned property fields, without the document."""
        return {
            field: self.cleaned_data.get(field)
            for field in LandRegistration.PROPERTY_FIELDS
        }


# ============ SEARCH & REVIEW FORMS ============
class LandSearchForm(forms.Form):
    q = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': 'Search by title deed number or location...'
        })
    )
    district = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Filter by district'})
    )
    land_use = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Filter by land use'})
    )

    def filters(self):
        if not self.is_valid():
            return {'query': '', 'district': '', 'land_use': ''}
        return {
            'query': self.cleaned_data['q'].strip(),
            'district': self.cleaned_data['district'].strip(),
            'land_use': self.cleaned_data['land_use'].strip(),
        }


class ReviewForm(forms.Form):
    notes = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={
            'class': 'form-control',
            'rows': 3,
            'placeholder': 'Add notes about this registration...'
        })
    )


class RoleAssignmentForm(forms.Form):
    role = forms.ChoiceField(choices=ROLE_CHOICES, widget=forms.Select(attrs={'class': 'form-select'}))


class MapKeyForm(forms.Form):
    provider = forms.ChoiceField(choices=[(name, name) for name in PROVIDERS])
    key = forms.CharField(
        max_length=200,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Paste your map API key'})
    )
    next = forms.CharField(required=False, widget=forms.HiddenInput)
